"""
Turns the share links an operator pastes into the admin console
(YouTube, Google Drive) into the URLs the gallery actually renders.

Every function here is total: a URL that can't be understood is handed
back untouched, so a malformed entry never breaks a page.
"""

import re
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional
from urllib.parse import urlparse


class HostKind(str, Enum):
    YOUTUBE = "youtube"
    GOOGLE_DRIVE = "google_drive"
    OTHER = "other"


class MediaType(str, Enum):
    PHOTO = "photo"
    VIDEO = "video"


class PortfolioCategory(str, Enum):
    WEDDING = "wedding"
    PRE_WEDDING = "pre-wedding"
    BABY_SHOWER_MATERNITY = "baby-shower-maternity"
    BIRTHDAYS_FAMILY = "birthdays-family"
    DRONE = "drone"
    MODEL_CANDID = "model-candid"

    @property
    def label(self) -> str:
        return CATEGORY_LABELS[self]

    @classmethod
    def from_slug(cls, slug: str) -> Optional["PortfolioCategory"]:
        try:
            return cls(slug)
        except ValueError:
            return None


CATEGORY_LABELS = {
    PortfolioCategory.WEDDING: "Wedding",
    PortfolioCategory.PRE_WEDDING: "Pre-Wedding",
    PortfolioCategory.BABY_SHOWER_MATERNITY: "Baby Shower & Maternity",
    PortfolioCategory.BIRTHDAYS_FAMILY: "Birthdays & Family",
    PortfolioCategory.DRONE: "Drone Shoot",
    PortfolioCategory.MODEL_CANDID: "Model & Candid",
}


@dataclass(frozen=True)
class MediaReference:
    """One portfolio entry as the viewing side sees it."""

    id: str
    media_type: MediaType
    category: PortfolioCategory
    raw_url: str
    full_resolution_url: Optional[str] = None
    title: Optional[str] = None
    created_at: Optional[datetime] = None

    def __post_init__(self):
        # rows from the store carry plain strings
        object.__setattr__(self, "media_type", MediaType(self.media_type))
        category = PortfolioCategory.from_slug(self.category)
        if category is not None:
            object.__setattr__(self, "category", category)


# =====================================================================
# PATTERNS
# =====================================================================

_ID = r"([a-zA-Z0-9_-]+)"

YOUTUBE_PATTERNS = [
    re.compile(r"(?:https?://)?(?:www\.)?youtu\.be/" + _ID),
    re.compile(r"(?:https?://)?(?:www\.|m\.)?youtube\.com/watch\?(?:.*&)?v=" + _ID),
    re.compile(r"(?:https?://)?(?:www\.)?youtube\.com/embed/" + _ID),
    re.compile(r"(?:https?://)?(?:www\.)?youtube\.com/v/" + _ID),
]

DRIVE_PATTERNS = [
    re.compile(r"(?:https?://)?drive\.google\.com/file/d/" + _ID + r"(?:/view|/preview)?"),
    re.compile(r"(?:https?://)?drive\.google\.com/open\?id=" + _ID),
    re.compile(r"(?:https?://)?drive\.google\.com/thumbnail\?id=" + _ID),
]

YOUTUBE_QUALITIES = {
    "default": "default",
    "medium": "mqdefault",
    "high": "hqdefault",
    "maxres": "maxresdefault",
}

DEFAULT_THUMBNAIL_SIZE = 800
FULL_SCREEN_SIZE = 4000


def _first_match(patterns, url: str) -> Optional[str]:
    for pattern in patterns:
        match = pattern.search(url)
        if match and match.group(1):
            return match.group(1)
    return None


# =====================================================================
# CLASSIFICATION
# =====================================================================

HOST_DOMAINS = (
    ("drive.google.com", HostKind.GOOGLE_DRIVE),
    ("youtube.com", HostKind.YOUTUBE),
    ("youtu.be", HostKind.YOUTUBE),
)

HAS_AUTHORITY = re.compile(r"^(?:[a-z][a-z0-9+.-]*:)?//", re.IGNORECASE)


def _hostname(url: str) -> str:
    url = url.strip()
    # pasted links often drop the scheme
    if not HAS_AUTHORITY.match(url):
        url = "//" + url
    try:
        return (urlparse(url).hostname or "").lower()
    except ValueError:
        return ""


def classify_host(url: Optional[str]) -> HostKind:
    """Decide the host from the URL's hostname, never from its path or query."""
    if not url:
        return HostKind.OTHER
    host = _hostname(url)
    for domain, kind in HOST_DOMAINS:
        if host == domain or host.endswith("." + domain):
            return kind
    return HostKind.OTHER


def extract_youtube_id(url: str) -> Optional[str]:
    return _first_match(YOUTUBE_PATTERNS, url or "")


def extract_drive_id(url: str) -> Optional[str]:
    return _first_match(DRIVE_PATTERNS, url or "")


def is_canonical_embed(url: str) -> bool:
    return "youtube.com/embed/" in url or (
        "drive.google.com/file/d/" in url and "/preview" in url
    )


# =====================================================================
# DERIVATIONS
# =====================================================================

def to_embed_url(url: str) -> str:
    """Canonical player/frame URL, or ``url`` itself when nothing matches."""
    if not url or is_canonical_embed(url):
        return url

    host = classify_host(url)

    if host is HostKind.YOUTUBE:
        video_id = extract_youtube_id(url)
        if video_id:
            return f"https://www.youtube.com/embed/{video_id}"

    elif host is HostKind.GOOGLE_DRIVE:
        file_id = extract_drive_id(url)
        if file_id:
            return f"https://drive.google.com/file/d/{file_id}/preview"

    return url


def to_video_thumbnail(url: str, quality: str = "high") -> Optional[str]:
    """
    YouTube still image for ``url``. None means there is no derivable
    thumbnail and the caller should render the source directly.
    """
    if classify_host(url) is not HostKind.YOUTUBE:
        return None

    embed_url = to_embed_url(url)
    video_id = extract_youtube_id(embed_url)
    if not video_id:
        return None

    size = YOUTUBE_QUALITIES.get(quality, YOUTUBE_QUALITIES["high"])
    return f"https://img.youtube.com/vi/{video_id}/{size}.jpg"


def drive_thumbnail_url(file_id: str, size: int) -> str:
    return f"https://drive.google.com/thumbnail?id={file_id}&sz=w{size}"


def to_thumbnail_url(
    url: str,
    media_type: MediaType = MediaType.PHOTO,
    size: int = DEFAULT_THUMBNAIL_SIZE,
) -> str:
    host = classify_host(url)

    if host is HostKind.YOUTUBE:
        return to_video_thumbnail(url, "high") or url

    if host is HostKind.GOOGLE_DRIVE and MediaType(media_type) is MediaType.PHOTO:
        file_id = extract_drive_id(url)
        if file_id:
            return drive_thumbnail_url(file_id, size)

    return url


def to_full_screen_url(item: MediaReference, size: int = FULL_SCREEN_SIZE) -> str:
    """
    Best available rendition for the lightbox. Drive refuses to hot-link
    originals, so a large Drive thumbnail stands in for a photo's full
    resolution unless the operator supplied an override.
    """
    if MediaType(item.media_type) is MediaType.VIDEO:
        return to_embed_url(item.raw_url)

    if item.full_resolution_url:
        return item.full_resolution_url

    if classify_host(item.raw_url) is HostKind.GOOGLE_DRIVE:
        file_id = extract_drive_id(item.raw_url)
        if file_id:
            return drive_thumbnail_url(file_id, size)

    return to_embed_url(item.raw_url)


def with_autoplay(url: str) -> str:
    separator = "&" if "?" in url else "?"
    return f"{url}{separator}autoplay=1"
