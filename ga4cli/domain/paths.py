"""
Spelling variants of a user-entered URL path
"""

from ga4cli.errors import InvalidInputError

from .entities import PathVariants


def normalize_path(raw_path: str) -> str:
    path = (raw_path or "").strip()
    if not path:
        raise InvalidInputError("Path must not be empty")
    if not path.startswith("/"):
        path = "/" + path
    return path


def compute_variants(raw_path: str) -> tuple[str, ...]:
    """
    Return the trailing-slash spellings of a path.

    The root is returned alone; any other path yields exactly two
    entries, with and without a trailing slash. Case is preserved.

    Raises:
        InvalidInputError: If the path is empty after trimming
    """
    path = normalize_path(raw_path)
    if path == "/":
        return ("/",)

    with_trailing = path if path.endswith("/") else path + "/"
    without_trailing = path.rstrip("/") or "/"
    return tuple(dict.fromkeys([without_trailing, with_trailing]))


def base_path(raw_path: str) -> str:
    """Normalized path without its trailing slash; the root stays "/"."""
    return normalize_path(raw_path).rstrip("/") or "/"


def resolve_variants(raw_path: str) -> PathVariants:
    return PathVariants(
        path=raw_path,
        variants=compute_variants(raw_path),
        base_path=base_path(raw_path)
    )
