"""Line splitting shared by documents and range providers.

Fold line numbers from tree-sitter count ``\\n`` only, so document text must be
split the same way. ``str.splitlines`` also breaks on form feeds, ``\\x1c``-``\\x1e``,
``\\x85``, ``\\u2028``, ``\\u2029`` and a lone ``\\r``, which would shift every
later line away from its folds.
"""


def split_lines(text: str) -> list[str]:
    """Split text into lines on ``\\n`` only.

    A trailing ``\\r`` is stripped from each line, and a final newline does not
    start an extra empty line.

    Examples:
        >>> split_lines("a\\r\\nb\\x0cc\\n")
        ['a', 'b\\x0cc']
        >>> split_lines("")
        []
    """
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]
