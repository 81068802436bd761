"""Line lookups over a built fold tree."""

from foldctx.models import FoldNode


def find_innermost_containing(node: FoldNode, lnum: int) -> FoldNode | None:
    """Find the innermost fold containing a line.

    A line that opens a fold belongs to that fold, so the search stops there
    rather than descending into a child that starts on the same line.

    Args:
        node: Node to search from (usually the tree root)
        lnum: 1-indexed line number

    Returns:
        The innermost containing node, or None if the line is outside ``node``.
        Searching from the root of a tree with no matching fold returns the
        root itself.
    """
    target = lnum - 1

    if target == node.start_line:
        return node

    if not node.contains_line(target):
        return None

    # First match wins if partially overlapping siblings both contain the line
    for child in node.children:
        found = find_innermost_containing(child, lnum)
        if found is not None:
            return found

    return node


def parent_and_preceding_siblings(node: FoldNode) -> tuple[FoldNode | None, list[FoldNode]]:
    """Return a node's parent and the siblings that come before it.

    Args:
        node: Any node of a built tree

    Returns:
        Tuple of (parent, preceding siblings in document order). A node without
        a parent gives (None, []).
    """
    parent = node.parent
    if parent is None:
        return None, []

    preceding = []
    for sibling in parent.children:
        if sibling is node:
            break
        preceding.append(sibling)

    return parent, preceding
