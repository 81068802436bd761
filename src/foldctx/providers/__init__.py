from pathlib import Path

from foldctx.providers.base import BaseProvider
from foldctx.providers.indent_provider import IndentProvider
from foldctx.providers.python_provider import PythonProvider

PYTHON_SUFFIXES = (".py", ".pyi")


def get_provider(name: str, tab_size: int = 4) -> BaseProvider:
    """Get a folding range provider by name.

    Args:
        name: "python" or "indent"
        tab_size: Tab width used by the indentation provider

    Returns:
        Provider instance

    Raises:
        ValueError: If the provider name is unknown
    """
    if name == "python":
        return PythonProvider()
    if name == "indent":
        return IndentProvider(tab_size=tab_size)
    raise ValueError(f"Unknown fold provider: {name}")


def get_provider_for_file(file_path: Path, tab_size: int = 4) -> BaseProvider:
    """Pick a folding range provider based on the file extension.

    Python files get syntax-tree folds; any other file falls back to
    indentation folds.
    """
    if file_path.suffix.lower() in PYTHON_SUFFIXES:
        return PythonProvider()
    return IndentProvider(tab_size=tab_size)


__all__ = [
    "BaseProvider",
    "IndentProvider",
    "PythonProvider",
    "get_provider",
    "get_provider_for_file",
]
