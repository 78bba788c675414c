from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

FALLBACK_IMAGE_URL = "images/defaultImage.jpg"


@dataclass(frozen=True)
class SearchResultItem:
    """One search hit reshaped for display.

    ``raw`` is the untouched Spotify object; the normalizer only reads it.
    """

    id: str
    kind: str
    title: str
    subtitle: str
    extra: str = ""
    cover_image_url: str = FALLBACK_IMAGE_URL
    raw: Dict[str, Any] = field(default_factory=dict, repr=False, compare=False)


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _raw_items(data: Any, container_key: str) -> List[Dict[str, Any]]:
    """Return data[container_key]["items"], keeping only object entries."""

    items = _as_dict(_as_dict(data).get(container_key)).get("items")
    if not isinstance(items, list):
        return []
    return [x for x in items if isinstance(x, dict)]


def _first_image_url(images: Any) -> Optional[str]:
    if not isinstance(images, list) or not images:
        return None
    url = _as_dict(images[0]).get("url")
    return str(url) if url else None


def _join_artists(artists: Any) -> str:
    if not isinstance(artists, list):
        return ""
    names = [str(a.get("name")) for a in artists if isinstance(a, dict) and a.get("name")]
    return ", ".join(names)


def get_image_url_for_item(kind: str, raw: Any, fallback: str = FALLBACK_IMAGE_URL) -> str:
    """Pick the best cover image for a raw Spotify object."""

    raw = _as_dict(raw)
    if kind == "track":
        # Track cover art lives on the album.
        url = _first_image_url(_as_dict(raw.get("album")).get("images"))
    elif kind in ("album", "playlist"):
        url = _first_image_url(raw.get("images"))
    else:
        url = None
    return url or fallback


def normalize_track_items(data: Any, *, fallback_image_url: str = FALLBACK_IMAGE_URL) -> List[SearchResultItem]:
    out: List[SearchResultItem] = []
    for track in _raw_items(data, "tracks"):
        out.append(
            SearchResultItem(
                id=str(track.get("id") or ""),
                kind="track",
                title=str(track.get("name") or "(Untitled track)"),
                subtitle=_join_artists(track.get("artists")) or "Unknown artist",
                extra=str(_as_dict(track.get("album")).get("name") or ""),
                cover_image_url=get_image_url_for_item("track", track, fallback_image_url),
                raw=track,
            )
        )
    return out


def normalize_album_items(data: Any, *, fallback_image_url: str = FALLBACK_IMAGE_URL) -> List[SearchResultItem]:
    out: List[SearchResultItem] = []
    for album in _raw_items(data, "albums"):
        total_tracks = album.get("total_tracks")
        release_date = album.get("release_date")
        out.append(
            SearchResultItem(
                id=str(album.get("id") or ""),
                kind="album",
                title=str(album.get("name") or "(Untitled album)"),
                subtitle=_join_artists(album.get("artists")) or "Unknown artist",
                extra=f"{total_tracks if total_tracks is not None else 0} tracks • {release_date or 'Unknown date'}",
                cover_image_url=get_image_url_for_item("album", album, fallback_image_url),
                raw=album,
            )
        )
    return out


def normalize_playlist_items(data: Any, *, fallback_image_url: str = FALLBACK_IMAGE_URL) -> List[SearchResultItem]:
    out: List[SearchResultItem] = []
    for playlist in _raw_items(data, "playlists"):
        total = _as_dict(playlist.get("tracks")).get("total")
        out.append(
            SearchResultItem(
                id=str(playlist.get("id") or ""),
                kind="playlist",
                title=str(playlist.get("name") or "(Untitled playlist)"),
                subtitle=str(_as_dict(playlist.get("owner")).get("display_name") or "Unknown owner"),
                extra=f"{total if total is not None else 0} tracks",
                cover_image_url=get_image_url_for_item("playlist", playlist, fallback_image_url),
                raw=playlist,
            )
        )
    return out


_NORMALIZERS: Dict[str, Callable[..., List[SearchResultItem]]] = {
    "track": normalize_track_items,
    "album": normalize_album_items,
    "playlist": normalize_playlist_items,
}


def normalize(kind: str, data: Any, *, fallback_image_url: str = FALLBACK_IMAGE_URL) -> List[SearchResultItem]:
    """Map a raw /search response for ``kind`` into display records, in service order."""

    normalizer = _NORMALIZERS.get(kind)
    if normalizer is None:
        raise ValueError(f"Unsupported result type: {kind!r}")
    return normalizer(data, fallback_image_url=fallback_image_url)
