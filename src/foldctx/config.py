"""Configuration management for fold context resolution."""

from dataclasses import dataclass
from pathlib import Path

import yaml

PROVIDER_CHOICES = ("auto", "python", "indent")


def _count(value, default: int, minimum: int) -> int:
    """Read a whole-number setting, falling back to the default when it is a bool or below minimum."""
    if isinstance(value, bool):
        return default
    value = int(value)
    if value < minimum:
        return default
    return value


@dataclass
class ContextConfig:
    """Configuration for context lines and range discovery.

    Attributes:
        max_lines: Soft limit on the number of context lines collected above
            the cursor. The last fold level walked may push past it.
        tab_size: Columns a tab counts for when measuring indentation.
        provider: Range provider to use: "auto" picks one from the file type,
            "python" forces syntax-tree folds, "indent" forces indentation folds.
    """
    max_lines: int = 5
    tab_size: int = 4
    provider: str = "auto"


def load_context_config(project_root: Path | None = None) -> ContextConfig:
    """Load context configuration from .foldctx file in project root.

    Args:
        project_root: Path to project root. If None, uses current directory.

    Returns:
        ContextConfig object with loaded or default values.

    Notes:
        If .foldctx file doesn't exist or can't be parsed, returns default config.
        Expected YAML structure:

        ```yaml
        context:
          max_lines: 5
          tab_size: 4
          provider: auto
        ```
    """
    if project_root is None:
        project_root = Path.cwd()

    config_path = project_root / ".foldctx"

    if not config_path.exists():
        return ContextConfig()

    try:
        with open(config_path, "r") as f:
            data = yaml.safe_load(f)

        if not isinstance(data, dict):
            return ContextConfig()

        context_config = data.get("context", {})
        if not isinstance(context_config, dict):
            return ContextConfig()

        provider = context_config.get("provider", ContextConfig.provider)
        if provider not in PROVIDER_CHOICES:
            provider = ContextConfig.provider

        return ContextConfig(
            max_lines=_count(
                context_config.get("max_lines", ContextConfig.max_lines), ContextConfig.max_lines, 0
            ),
            tab_size=_count(
                context_config.get("tab_size", ContextConfig.tab_size), ContextConfig.tab_size, 1
            ),
            provider=provider,
        )
    except (yaml.YAMLError, OSError, KeyError, TypeError, ValueError):
        # Return default config on any parsing errors
        return ContextConfig()
