from foldctx.lines import split_lines
from foldctx.models import FoldRange
from foldctx.providers.base import BaseProvider


def leading_indent_columns(text: str, tab_size: int = 4) -> int:
    """Return the indentation width of a line, counting tabs as ``tab_size`` columns."""
    count = 0
    for ch in text:
        if ch == " ":
            count += 1
        elif ch == "\t":
            count += tab_size
        else:
            break
    return count


class IndentProvider(BaseProvider):
    """Provider deriving folds from indentation, for any text document.

    A fold opens on a non-blank line followed by more deeply indented lines and
    closes on the last of those lines that is not blank.
    """

    def __init__(self, tab_size: int = 4):
        self.tab_size = tab_size

    def provide_ranges(self, source_code: str) -> list[FoldRange]:
        """Extract indentation folds from source code.

        Args:
            source_code: Document text

        Returns:
            List of FoldRange objects, innermost folds first
        """
        ranges = []
        # (indent, start_line) of lines that may still open a fold
        stack: list[tuple[int, int]] = []
        last_non_blank = -1

        for line_number, text in enumerate(split_lines(source_code)):
            if not text.strip():
                continue

            indent = leading_indent_columns(text, self.tab_size)
            while stack and indent <= stack[-1][0]:
                _, start_line = stack.pop()
                if last_non_blank > start_line:
                    ranges.append(FoldRange(start_line=start_line, end_line=last_non_blank))

            stack.append((indent, line_number))
            last_non_blank = line_number

        while stack:
            _, start_line = stack.pop()
            if last_non_blank > start_line:
                ranges.append(FoldRange(start_line=start_line, end_line=last_non_blank))

        return ranges
