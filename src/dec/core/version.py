"""Version string comparison for "is the installed copy up to date" checks."""

UNVERSIONED = frozenset({"", "dev", "unknown"})


def normalize_version(version: str) -> str:
    """Strip whitespace and a leading ``v``."""
    stripped = version.strip()
    if stripped[:1] in ("v", "V"):
        return stripped[1:]
    return stripped


def _parts(version: str) -> list[str]:
    core = version.split("-", 1)[0].split("+", 1)[0]
    parts = core.split(".")
    while len(parts) < 3:
        parts.append("0")
    return parts


def compare_versions(a: str, b: str) -> int:
    """Compare two version strings.

    Development builds (``dev``, ``unknown``, empty) sort below every release.
    Pre-release and build suffixes are ignored.

    Returns:
        -1 if a < b, 0 if equal, 1 if a > b
    """
    left = normalize_version(a)
    right = normalize_version(b)

    left_dev = left in UNVERSIONED
    right_dev = right in UNVERSIONED
    if left_dev or right_dev:
        if left_dev and right_dev:
            return 0
        return -1 if left_dev else 1

    for left_part, right_part in zip(_parts(left), _parts(right), strict=False):
        if left_part.isdigit() and right_part.isdigit():
            left_num, right_num = int(left_part), int(right_part)
            if left_num != right_num:
                return -1 if left_num < right_num else 1
        elif left_part != right_part:
            return -1 if left_part < right_part else 1

    left_len, right_len = len(_parts(left)), len(_parts(right))
    if left_len != right_len:
        return -1 if left_len < right_len else 1
    return 0


def is_newer(candidate: str, current: str) -> bool:
    """Return True when candidate is strictly newer than current."""
    return compare_versions(candidate, current) > 0
