"""Enclosing-fold context for the cursor line.

The context of a line is the opening line of every fold enclosing it, plus the
opening lines of the folds that precede each enclosing level. Rendered above
the cursor, it works as a breadcrumb trail of where the cursor sits.
"""

import logging
from collections.abc import Callable, Iterable

from foldctx.models import ContextLine, FoldTree
from foldctx.query import find_innermost_containing, parent_and_preceding_siblings

logger = logging.getLogger(__name__)


def resolve_context(tree: FoldTree, cursor_lnum: int, max_lines: int) -> list[int]:
    """Collect the context line numbers for a cursor position.

    The walk goes up one fold level at a time and stops once more than
    ``max_lines`` lines have been collected. Lines already collected are kept,
    so the result can exceed ``max_lines`` by the size of the last level.

    Args:
        tree: Fold tree of the document
        cursor_lnum: 1-indexed cursor line
        max_lines: Soft limit on the number of context lines

    Returns:
        Sorted, de-duplicated 1-indexed line numbers. Empty when the cursor is
        not inside any fold.
    """
    target = find_innermost_containing(tree.root, cursor_lnum)
    if target is None or tree.is_root(target):
        return []

    # The fold's own opening line is already on screen at the cursor
    if target.start_line == cursor_lnum - 1:
        target = target.parent
        if target is None or tree.is_root(target):
            return []

    lines = [target.start_line + 1]

    current = target
    while current.parent is not None and not tree.is_root(current.parent):
        parent, preceding = parent_and_preceding_siblings(current)
        lines.append(parent.start_line + 1)
        lines.extend(sibling.start_line + 1 for sibling in preceding)
        current = parent

        if len(lines) > max_lines:
            break

    return sorted(set(lines))


def collect_context_lines(
    line_numbers: Iterable[int],
    get_line: Callable[[int], str | None],
) -> list[ContextLine]:
    """Pair context line numbers with their text.

    Args:
        line_numbers: 1-indexed line numbers, as returned by resolve_context
        get_line: Returns the text of a 1-indexed line, or None if unavailable

    Returns:
        ContextLine list in the given order. Empty if any line's text could not
        be fetched.
    """
    context = []
    for lnum in line_numbers:
        text = get_line(lnum)
        if text is None:
            logger.warning(f"Failed to get text for context line {lnum}")
            return []
        context.append(ContextLine(lnum=lnum, text=text))
    return context
