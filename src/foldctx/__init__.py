"""foldctx - fold hierarchy and enclosing-fold context for source documents."""

try:
    from importlib.metadata import version

    __version__ = version("foldctx")
except Exception:
    __version__ = "0.0.0.dev0+local"  # Fallback for development
