"""Human-readable byte counts using decimal (SI) units."""

_SUFFIXES = ("B", "kB", "MB", "GB", "TB", "PB", "EB")
_BASE = 1000


def format_bytes(size: int) -> str:
    """Format a byte count such as 82854982 as "83 MB".

    Values below ten are printed as whole bytes. Larger values are scaled
    to the largest fitting unit and rounded to one decimal place; the
    decimal is kept only while the scaled value is below ten.
    """
    if size < 0:
        raise ValueError(f"size must not be negative: {size}")
    if size < 10:
        return f"{size} B"

    exponent = 0
    while exponent + 1 < len(_SUFFIXES) and size >= _BASE ** (exponent + 1):
        exponent += 1

    value = int(size / _BASE**exponent * 10 + 0.5) / 10
    suffix = _SUFFIXES[exponent]
    if value < 10:
        return f"{value:.1f} {suffix}"
    return f"{value:.0f} {suffix}"