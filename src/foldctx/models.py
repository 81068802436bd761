from collections.abc import Hashable, Iterator
from dataclasses import dataclass, field
from enum import Enum


class InvalidRangeError(ValueError):
    """Raised when a fold range or line count cannot form a valid tree."""


class FoldKind(Enum):
    """Known folding range kinds, plus OTHER for anything unrecognised."""
    COMMENT = "comment"
    IMPORTS = "imports"
    REGION = "region"
    OTHER = "other"
    ROOT = "root"  # Synthetic tree root only

    @classmethod
    def parse(cls, value: "str | FoldKind | None") -> "FoldKind | None":
        """Convert a provider-supplied kind tag to a FoldKind.

        Args:
            value: Kind string (e.g. "imports"), an existing FoldKind, or None

        Returns:
            Matching FoldKind, OTHER for unrecognised strings, None for None.
        """
        if value is None or isinstance(value, FoldKind):
            return value
        try:
            kind = cls(str(value).lower())
        except ValueError:
            return cls.OTHER
        # Providers never get to mark a range as the root
        return cls.OTHER if kind is cls.ROOT else kind


@dataclass(frozen=True)
class FoldRange:
    """A foldable line range (0-indexed, inclusive on both ends)."""
    start_line: int
    end_line: int
    kind: FoldKind | None = None


@dataclass(eq=False)
class FoldNode:
    """A fold in the nesting hierarchy.

    Children are ordered by ascending start line. ``parent`` points back up
    the tree and is left out of repr so printing a node never walks upward.
    """
    start_line: int
    end_line: int
    kind: FoldKind | None = None
    children: list["FoldNode"] = field(default_factory=list)
    parent: "FoldNode | None" = field(default=None, repr=False)

    @property
    def span(self) -> tuple[int, int]:
        return (self.start_line, self.end_line)

    def contains_line(self, line: int) -> bool:
        """Check whether a 0-indexed line falls inside this fold."""
        return self.start_line <= line <= self.end_line


@dataclass
class FoldTree:
    """Nested fold hierarchy for one document version, rooted at a synthetic root."""
    root: FoldNode
    line_count: int

    def is_root(self, node: FoldNode | None) -> bool:
        return node is self.root

    def walk(self) -> Iterator[FoldNode]:
        """Yield every real fold in document order (pre-order, root excluded)."""
        stack = list(reversed(self.root.children))
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))


@dataclass
class CacheEntry:
    """The single cached tree for one document."""
    document_id: Hashable
    version: int
    tree: FoldTree


@dataclass
class ContextLine:
    """A line shown above the cursor (1-indexed line number plus its text)."""
    lnum: int
    text: str
