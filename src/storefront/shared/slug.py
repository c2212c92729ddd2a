import re

_NON_SLUG = re.compile(r"[^a-z0-9\s]")
_WHITESPACE = re.compile(r"\s+")
_HYPHENS = re.compile(r"-+")


def slugify(name: str) -> str:
    """Derive a URL slug from a display name.

    >>> slugify("Baby's Best!!  Blanket")
    'babys-best-blanket'
    """
    slug = _NON_SLUG.sub("", (name or "").lower())
    slug = _WHITESPACE.sub("-", slug)
    slug = _HYPHENS.sub("-", slug)
    return slug.strip("-")
