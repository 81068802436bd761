"""Nested fold tree construction.

Builds the containment hierarchy of a document's folding ranges in a single
stack-based pass over the ranges sorted by start line, instead of testing
every pair of ranges for containment.
"""

import logging
from collections.abc import Iterable

from foldctx.models import FoldKind, FoldNode, FoldRange, FoldTree, InvalidRangeError

logger = logging.getLogger(__name__)

ROOT_START_LINE = -1


def make_root(line_count: int) -> FoldNode:
    """Create the synthetic root spanning the whole document.

    The root starts one line before the document and ends one line past the
    last 0-indexed line, so every in-document line falls inside it.
    """
    return FoldNode(start_line=ROOT_START_LINE, end_line=line_count, kind=FoldKind.ROOT)


def _validate(ranges: list[FoldRange], line_count: int) -> None:
    """Reject the whole input if any part of it is malformed.

    Raises:
        InvalidRangeError: If line_count is negative, or a range starts before
            line 0 or ends before it starts.
    """
    if line_count < 0:
        raise InvalidRangeError(f"Line count must not be negative, got {line_count}")

    for fold_range in ranges:
        if fold_range.start_line < 0:
            raise InvalidRangeError(
                f"Fold range starts at negative line: "
                f"({fold_range.start_line}, {fold_range.end_line})"
            )
        if fold_range.start_line > fold_range.end_line:
            raise InvalidRangeError(
                f"Fold range ends before it starts: "
                f"({fold_range.start_line}, {fold_range.end_line})"
            )


def build_fold_tree(ranges: Iterable[FoldRange], line_count: int) -> FoldTree:
    """Build the fold hierarchy for one document version.

    Ranges are sorted by start line, then end line, so every possible
    ancestor of a range is already on the stack when the range is reached.
    For each range, stack entries that end no later than it cannot contain it
    and are popped; whatever remains on top is its parent.

    A range identical to the current stack top is a duplicate (several
    providers or fold levels reporting the same span) and is skipped, so the
    first occurrence wins.

    Args:
        ranges: Folding ranges in any order, possibly with duplicates
        line_count: Number of lines in the document

    Returns:
        FoldTree whose root has the top-level folds as children. An empty
        range set gives a root with no children.

    Raises:
        InvalidRangeError: If any range is malformed or line_count is negative.
            Nothing is built in that case.
    """
    ordered = list(ranges)
    _validate(ordered, line_count)
    ordered.sort(key=lambda r: (r.start_line, r.end_line))

    root = make_root(line_count)
    stack = [root]

    for fold_range in ordered:
        top = stack[-1]
        if top.start_line == fold_range.start_line and top.end_line == fold_range.end_line:
            logger.debug(
                f"Skipping duplicate fold ({fold_range.start_line}, {fold_range.end_line})"
            )
            continue

        # A fold ending on the same line as a stack entry cannot be its child.
        # The root stays as the floor even for folds reaching past line_count.
        while len(stack) > 1 and stack[-1].end_line <= fold_range.end_line:
            stack.pop()

        parent = stack[-1]
        node = FoldNode(
            start_line=fold_range.start_line,
            end_line=fold_range.end_line,
            kind=FoldKind.parse(fold_range.kind),
            parent=parent,
        )
        parent.children.append(node)
        stack.append(node)

    return FoldTree(root=root, line_count=line_count)
