from abc import ABC, abstractmethod

from foldctx.models import FoldRange


class BaseProvider(ABC):
    """Abstract base class for folding range providers."""

    @abstractmethod
    def provide_ranges(self, source_code: str) -> list[FoldRange]:
        """Discover all folding ranges in source code.

        Args:
            source_code: The document text

        Returns:
            List of FoldRange objects in no particular order
        """
        pass
