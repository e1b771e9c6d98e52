"""Human-readable formatting helpers."""

_SIZE_SUFFIXES = ("B", "KB", "MB", "GB")


def format_file_size(size_bytes: int) -> str:
    """Format a byte count with one decimal, e.g. ``1.5 KB``.

    Args:
        size_bytes: Size in bytes.

    Returns:
        str: Formatted size, capped at GB.
    """
    size = float(size_bytes)
    index = 0
    while size >= 1024 and index < len(_SIZE_SUFFIXES) - 1:
        size /= 1024
        index += 1
    return f"{size:.1f} {_SIZE_SUFFIXES[index]}"
