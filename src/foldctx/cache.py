"""Per-document cache of built fold trees.

Each attached document owns at most one cached tree, tagged with the document
version it was built from. A query against a newer version rebuilds and
replaces the entry; detaching or reloading the document drops it entirely.
"""

import logging
import threading
from collections.abc import Callable, Hashable, Iterable

from foldctx.fold_tree import build_fold_tree
from foldctx.models import CacheEntry, FoldRange, FoldTree

logger = logging.getLogger(__name__)

TreeBuilder = Callable[[Iterable[FoldRange], int], FoldTree]


class FoldTreeCache:
    """Version-gated memo of fold trees, one entry per document.

    This is not an LRU: there is no size bound beyond one tree per attached
    document, and trees are never shared between documents. A rebuild swaps in
    a new tree and never touches the old one, so callers still traversing an
    earlier tree see a consistent structure.
    """

    def __init__(self, builder: TreeBuilder = build_fold_tree):
        """Initialize an empty cache.

        Args:
            builder: Function building a FoldTree from ranges and a line count
        """
        self._builder = builder
        self._entries: dict[Hashable, CacheEntry] = {}
        self._lock = threading.RLock()

    def get_tree(
        self,
        document_id: Hashable,
        version: int,
        ranges: Iterable[FoldRange],
        line_count: int,
    ) -> FoldTree:
        """Return the fold tree for a document version, building it if needed.

        Args:
            document_id: Identity of the document
            version: Document version the ranges belong to
            ranges: Folding ranges for that version
            line_count: Number of lines in the document

        Returns:
            The cached tree when the version matches, otherwise a freshly built
            tree that replaces any previous entry for the document.

        Raises:
            InvalidRangeError: If the ranges cannot be built into a tree. The
                previous entry, if any, is left in place.
        """
        with self._lock:
            entry = self._entries.get(document_id)
            if entry is not None and entry.version == version:
                logger.debug(f"Fold tree cache hit for {document_id!r} at version {version}")
                return entry.tree

            if entry is None:
                logger.debug(f"Building fold tree for {document_id!r} at version {version}")
            else:
                logger.debug(
                    f"Rebuilding fold tree for {document_id!r}: "
                    f"version {entry.version} -> {version}"
                )

            try:
                tree = self._builder(ranges, line_count)
            except ValueError as e:
                logger.error(f"Failed to build fold tree for {document_id!r}: {e}")
                raise

            self._entries[document_id] = CacheEntry(
                document_id=document_id,
                version=version,
                tree=tree,
            )
            return tree

    def get_entry(self, document_id: Hashable) -> CacheEntry | None:
        """Look up the current entry for a document without building anything."""
        with self._lock:
            return self._entries.get(document_id)

    def invalidate(self, document_id: Hashable) -> None:
        """Drop the cached tree for a document.

        Called when a document is detached or reloaded, since its line count
        may have changed. Unknown documents are ignored.
        """
        with self._lock:
            if self._entries.pop(document_id, None) is not None:
                logger.debug(f"Invalidated fold tree cache for {document_id!r}")

    def clear(self) -> None:
        """Drop every cached tree."""
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, document_id: Hashable) -> bool:
        with self._lock:
            return document_id in self._entries
