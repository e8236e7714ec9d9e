"""
Link target and heading anchor helpers.

GitHub renders the standards corpus, so anchors follow GitHub's rules:
lowercase, punctuation dropped, each space turned into a hyphen, and
repeated headings suffixed ``-1``, ``-2`` and so on.

Example:
    >>> slugify("Naming & Formatting")
    'naming--formatting'
    >>> classify_target("../Code%20Style/Code%20Style.md#naming")
    ('relative', '../Code Style/Code Style.md', 'naming')
"""

import re
from urllib.parse import unquote

LINK_KIND_EXTERNAL = "external"
LINK_KIND_ANCHOR = "anchor"
LINK_KIND_RELATIVE = "relative"

_SCHEME_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.\-]*:")
_INLINE_LINK_RE = re.compile(r"!?\[([^\[\]]*)\]\([^)]*\)")
_HTML_TAG_RE = re.compile(r"</?[A-Za-z][^<>]*>")
_CODE_SPAN_RE = re.compile(r"(`+[^`]*`+)")
_SLUG_STRIP_RE = re.compile(r"[^\w\- ]", re.UNICODE)
_WHITESPACE_RE = re.compile(r"\s+")


def slugify(text: str) -> str:
    """Convert heading text into a GitHub-style anchor slug.

    Args:
        text: Raw heading text, possibly containing inline markup

    Returns:
        Anchor slug without the leading ``#``
    """
    # Inline HTML renders as nothing, except inside code spans
    text = "".join(
        part if part.startswith("`") else _HTML_TAG_RE.sub("", part)
        for part in _CODE_SPAN_RE.split(text)
    )
    # Links render as their text, images as their alt text
    text = _INLINE_LINK_RE.sub(r"\1", text)
    text = text.replace("`", "").replace("*", "")
    text = text.strip().lower()
    text = _SLUG_STRIP_RE.sub("", text)
    return text.replace(" ", "-")


def unique_slug(slug: str, seen: dict[str, int]) -> str:
    """Disambiguate a slug against the slugs already used in a document.

    Args:
        slug: Base slug from :func:`slugify`
        seen: Mutable mapping of base slug to times seen

    Returns:
        ``slug`` the first time, ``slug-1``, ``slug-2``... afterwards
    """
    count = seen.get(slug, 0)
    seen[slug] = count + 1
    if count == 0:
        return slug
    return f"{slug}-{count}"


def normalize_label(label: str) -> str:
    """Normalize a reference-link label for case-insensitive matching."""
    return _WHITESPACE_RE.sub(" ", label.strip()).lower()


def classify_target(target: str) -> tuple[str, str, str | None]:
    """Classify a link destination.

    Args:
        target: Destination exactly as written between the parentheses

    Returns:
        Tuple of (kind, decoded path, fragment). ``kind`` is one of
        ``external``, ``anchor`` or ``relative``. For external links the
        path is the target unchanged.
    """
    target = target.strip()
    if target.startswith("<") and target.endswith(">"):
        target = target[1:-1].strip()

    if target.startswith("//") or _SCHEME_RE.match(target):
        return LINK_KIND_EXTERNAL, target, None

    path_part, sep, fragment = target.partition("#")
    path_part = path_part.split("?", 1)[0]
    decoded_fragment = unquote(fragment) if sep else None

    if not path_part:
        return LINK_KIND_ANCHOR, "", decoded_fragment

    return LINK_KIND_RELATIVE, unquote(path_part), decoded_fragment
