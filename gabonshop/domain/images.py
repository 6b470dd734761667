"""Product image field shapes and their normalization.

Listings were written over time with several shapes for the image field:
``["https://..."]``, ``[{"url": "https://..."}]``, a bare ``"https://..."``
string, or only the legacy ``image_url`` column. ``classify_images`` turns a
raw document into one of the tagged shapes below and ``resolve_images`` gives
the canonical ordered list of URLs.

The image host hands back *file-group* references (``.../<uuid>~3/``) when
several files were picked at once. ``safe_image_url`` points those at the
first file of the group.
"""

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Union

DIRECT_IMAGE_MARKER = "/nth/"
GROUP_DELIMITER = "~"
FIRST_OF_GROUP = "/nth/0/"


@dataclass(frozen=True)
class StringList:
    urls: list[str]


@dataclass(frozen=True)
class UrlObjectList:
    items: list[Mapping[str, Any]]


@dataclass(frozen=True)
class StringUrl:
    url: str


@dataclass(frozen=True)
class LegacySingle:
    url: str


@dataclass(frozen=True)
class Missing:
    reason: str = field(default="no image field")


ImageField = Union[StringList, UrlObjectList, StringUrl, LegacySingle, Missing]


def classify_images(doc: Mapping[str, Any]) -> ImageField:
    """Decide which shape a raw product document uses for its images.

    Lists are classified by their first element; an empty list, a list of
    blank strings or a blank string is treated like an absent field and falls through to ``image_url``.
    """
    images = doc.get("images")

    if isinstance(images, list) and images:
        first = images[0]
        if isinstance(first, str):
            urls = [u for u in images if isinstance(u, str) and u]
            if urls:
                return StringList(urls)
        if isinstance(first, Mapping) and first.get("url"):
            return UrlObjectList([i for i in images if isinstance(i, Mapping)])

    if isinstance(images, str) and images:
        return StringUrl(images)

    legacy = doc.get("image_url") or doc.get("imageUrl")
    if legacy:
        return LegacySingle(legacy)

    return Missing()


def resolve_images(doc: Mapping[str, Any]) -> list[str]:
    shape = classify_images(doc)

    if isinstance(shape, StringList):
        return list(shape.urls)
    if isinstance(shape, UrlObjectList):
        return [item["url"] for item in shape.items if item.get("url")]
    if isinstance(shape, (StringUrl, LegacySingle)):
        return [shape.url]
    return []


def safe_image_url(url: Optional[str]) -> Optional[str]:
    """Rewrite a file-group reference to its first file. Idempotent."""
    if not url:
        return None
    if DIRECT_IMAGE_MARKER in url:
        return url
    if GROUP_DELIMITER in url:
        base = url[:-1] if url.endswith("/") else url
        return base + FIRST_OF_GROUP
    return url


def normalize_images(doc: Mapping[str, Any]) -> list[str]:
    """Resolved and rewritten display URLs, cover first. Blank entries are dropped."""
    return [url for url in map(safe_image_url, resolve_images(doc)) if url]


def cover_image(doc: Mapping[str, Any]) -> Optional[str]:
    urls = normalize_images(doc)
    return urls[0] if urls else None
