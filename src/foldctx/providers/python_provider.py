import tree_sitter_python
from tree_sitter import Language, Parser

from foldctx.lines import split_lines
from foldctx.models import FoldKind, FoldRange
from foldctx.providers.base import BaseProvider

# Syntax nodes that fold when they span more than one line
FOLDABLE_NODE_TYPES = frozenset({
    "class_definition",
    "function_definition",
    "if_statement",
    "for_statement",
    "while_statement",
    "try_statement",
    "with_statement",
    "match_statement",
    "case_clause",
    "dictionary",
    "list",
    "set",
    "tuple",
    "list_comprehension",
    "dictionary_comprehension",
    "set_comprehension",
    "generator_expression",
    "argument_list",
    "parameters",
    "string",
})

IMPORT_NODE_TYPES = frozenset({
    "import_statement",
    "import_from_statement",
    "future_import_statement",
})


class PythonProvider(BaseProvider):
    """Provider discovering folds in Python source code using tree-sitter."""

    def __init__(self):
        self.language = Language(tree_sitter_python.language())
        self.parser = Parser(self.language)

    def provide_ranges(self, source_code: str) -> list[FoldRange]:
        """Extract syntax folds from Python source code.

        Multi-line definitions, compound statements and bracketed literals fold
        without a kind. A run of consecutive import statements folds as
        IMPORTS from the first import to the last, with any comments between
        them inside the run. Two or more consecutive full-line comments fold as
        COMMENT.

        Args:
            source_code: Python source code to parse

        Returns:
            List of FoldRange objects
        """
        tree = self.parser.parse(bytes(source_code, "utf8"))
        lines = split_lines(source_code)

        ranges: list[FoldRange] = []
        comment_rows: list[int] = []
        self._collect(tree.root_node, lines, ranges, comment_rows)
        ranges.extend(self._comment_ranges(comment_rows))

        return ranges

    def _collect(
        self,
        node,
        lines: list[str],
        ranges: list[FoldRange],
        comment_rows: list[int],
    ) -> None:
        """Walk a node's children, recording foldable nodes, import runs and comments."""
        import_run = []

        for child in node.children:
            if child.type in IMPORT_NODE_TYPES:
                import_run.append(child)
                continue

            # Comments between imports stay inside the import run
            if child.type == "comment":
                row = child.start_point[0]
                if row < len(lines) and lines[row].lstrip().startswith("#"):
                    comment_rows.append(row)
                continue

            self._flush_imports(import_run, ranges)
            import_run = []

            start_line = child.start_point[0]
            end_line = child.end_point[0]
            if child.type in FOLDABLE_NODE_TYPES and end_line > start_line:
                ranges.append(FoldRange(start_line=start_line, end_line=end_line))

            self._collect(child, lines, ranges, comment_rows)

        self._flush_imports(import_run, ranges)

    def _flush_imports(self, import_run: list, ranges: list[FoldRange]) -> None:
        """Record a run of import statements as one IMPORTS fold."""
        if not import_run:
            return

        start_line = import_run[0].start_point[0]
        end_line = import_run[-1].end_point[0]
        if end_line > start_line:
            ranges.append(FoldRange(start_line=start_line, end_line=end_line, kind=FoldKind.IMPORTS))

    def _comment_ranges(self, comment_rows: list[int]) -> list[FoldRange]:
        """Group consecutive full-line comment rows into COMMENT folds."""
        ranges = []
        run_start = None
        previous = None

        for row in sorted(set(comment_rows)):
            if previous is not None and row == previous + 1:
                previous = row
                continue
            if run_start is not None and previous > run_start:
                ranges.append(FoldRange(start_line=run_start, end_line=previous, kind=FoldKind.COMMENT))
            run_start = previous = row

        if run_start is not None and previous > run_start:
            ranges.append(FoldRange(start_line=run_start, end_line=previous, kind=FoldKind.COMMENT))

        return ranges
