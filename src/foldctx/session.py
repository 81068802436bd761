"""Document lifecycle around the fold tree cache.

A session tracks the attached documents, their text, their folding ranges and
a version counter bumped whenever the ranges may have changed. Context queries
go through the session's cache, so the tree is only rebuilt after a change.
"""

import logging
from collections.abc import Hashable, Iterable
from dataclasses import dataclass, field

from foldctx.cache import FoldTreeCache
from foldctx.config import ContextConfig
from foldctx.context import collect_context_lines, resolve_context
from foldctx.lines import split_lines
from foldctx.models import ContextLine, FoldRange, FoldTree
from foldctx.providers import BaseProvider, IndentProvider

logger = logging.getLogger(__name__)


@dataclass
class FoldDocument:
    """An attached document with the folding ranges of its current version."""
    document_id: Hashable
    lines: list[str]
    provider: BaseProvider
    ranges: list[FoldRange] = field(default_factory=list)
    version: int = 1

    @property
    def line_count(self) -> int:
        return len(self.lines)

    def line(self, lnum: int) -> str | None:
        """Return the text of a 1-indexed line, or None if out of range."""
        if 1 <= lnum <= len(self.lines):
            return self.lines[lnum - 1]
        return None


class FoldContextSession:
    """Attached documents plus the fold tree cache serving their context queries."""

    def __init__(self, cache: FoldTreeCache | None = None, config: ContextConfig | None = None):
        self.cache = cache if cache is not None else FoldTreeCache()
        self.config = config if config is not None else ContextConfig()
        self._documents: dict[Hashable, FoldDocument] = {}

    def __contains__(self, document_id: Hashable) -> bool:
        return document_id in self._documents

    def _document(self, document_id: Hashable) -> FoldDocument:
        try:
            return self._documents[document_id]
        except KeyError:
            raise KeyError(f"Document not attached: {document_id!r}") from None

    def get_document(self, document_id: Hashable) -> FoldDocument | None:
        return self._documents.get(document_id)

    def attach(
        self,
        document_id: Hashable,
        text: str,
        provider: BaseProvider | None = None,
    ) -> FoldDocument:
        """Start tracking a document and discover its folds.

        Re-attaching an already attached document replaces it and drops its
        cached tree.

        Args:
            document_id: Identity of the document (e.g. its path)
            text: Full document text
            provider: Folding range provider, indentation folds if None

        Returns:
            The attached document at version 1
        """
        if provider is None:
            provider = IndentProvider(tab_size=self.config.tab_size)

        if document_id in self._documents:
            self.cache.invalidate(document_id)

        document = FoldDocument(
            document_id=document_id,
            lines=split_lines(text),
            provider=provider,
        )
        document.ranges = provider.provide_ranges(text)
        self._documents[document_id] = document
        logger.debug(f"Attached {document_id!r} with {len(document.ranges)} fold ranges")
        return document

    def update(self, document_id: Hashable, text: str) -> FoldDocument:
        """Replace a document's text, rediscover its folds and bump its version.

        Raises:
            KeyError: If the document is not attached
        """
        document = self._document(document_id)
        document.lines = split_lines(text)
        document.ranges = document.provider.provide_ranges(text)
        document.version += 1
        return document

    def apply_ranges(self, document_id: Hashable, ranges: Iterable[FoldRange]) -> FoldDocument:
        """Set a document's folding ranges directly and bump its version.

        Raises:
            KeyError: If the document is not attached
        """
        document = self._document(document_id)
        document.ranges = list(ranges)
        document.version += 1
        return document

    def detach(self, document_id: Hashable) -> None:
        """Stop tracking a document and drop its cached tree."""
        self._documents.pop(document_id, None)
        self.cache.invalidate(document_id)
        logger.debug(f"Detached {document_id!r}")

    def reload(self, document_id: Hashable, text: str) -> FoldDocument:
        """Re-read a document from scratch.

        The cached tree is dropped rather than version-checked, since a reload
        can change the line count arbitrarily.

        Raises:
            KeyError: If the document is not attached
        """
        document = self._document(document_id)
        return self.attach(document_id, text, provider=document.provider)

    def tree(self, document_id: Hashable) -> FoldTree:
        """Return the fold tree for the document's current version.

        Raises:
            KeyError: If the document is not attached
            InvalidRangeError: If the document's ranges are malformed
        """
        document = self._document(document_id)
        return self.cache.get_tree(
            document_id,
            document.version,
            document.ranges,
            document.line_count,
        )

    def context(
        self,
        document_id: Hashable,
        cursor_lnum: int,
        max_lines: int | None = None,
    ) -> list[ContextLine]:
        """Resolve the context lines shown above the cursor.

        Args:
            document_id: Identity of an attached document
            cursor_lnum: 1-indexed cursor line
            max_lines: Soft limit on context lines, configured value if None

        Returns:
            ContextLine list in document order. Empty when the document is not
            attached or the cursor is not inside any fold.
        """
        document = self._documents.get(document_id)
        if document is None:
            logger.debug(f"No context for unattached document {document_id!r}")
            return []

        if max_lines is None:
            max_lines = self.config.max_lines

        tree = self.tree(document_id)
        line_numbers = resolve_context(tree, cursor_lnum, max_lines)
        return collect_context_lines(line_numbers, document.line)
