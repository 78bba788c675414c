import json
import logging
from typing import Any, Dict, Optional

import httpx

from .errors import NotLoggedInError, SpotifyAPIError, SpotifyError, SpotifyNetworkError
from .session import AuthSession

logger = logging.getLogger(__name__)

SPOTIFY_API_BASE_URL = "https://api.spotify.com/v1"

SEARCH_KINDS = ("track", "album", "playlist")
DEFAULT_SEARCH_LIMIT = 25


class SpotifyClient:
    """Thin Spotify Web API client bound to an ``AuthSession``.

    Every call requires a logged-in session and sends its bearer token. There is
    no retry and no refresh: a 401 from a stale token is reported like any
    other API error.
    """

    def __init__(
        self,
        session: AuthSession,
        config: Optional[Dict[str, Any]] = None,
        *,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.session = session
        self.config = config or {}
        self.transport = transport

    def request_json(self, method: str, path: str, *, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Make a Spotify Web API request and return parsed JSON."""

        token = self.session.access_token
        if not token:
            raise NotLoggedInError()

        url = f"{SPOTIFY_API_BASE_URL}{path}"
        query = {k: str(v) for k, v in (params or {}).items() if v is not None}
        timeout = float(self.config.get("spotify_request_timeout", 30.0))

        try:
            with httpx.Client(timeout=timeout, transport=self.transport) as client:
                resp = client.request(
                    method.upper(),
                    url,
                    params=query,
                    headers={
                        "Authorization": f"Bearer {token}",
                        "Accept": "application/json",
                    },
                )
        except httpx.HTTPError as e:
            raise SpotifyNetworkError(str(e) or type(e).__name__) from e

        if resp.status_code >= 400:
            logger.debug("%s %s -> HTTP %s", method.upper(), path, resp.status_code)
            raise SpotifyAPIError(resp.status_code, resp.reason_phrase)

        if not resp.content:
            return {}

        try:
            return resp.json()
        except json.JSONDecodeError as e:
            raise SpotifyError(f"Spotify API response was not JSON (status {resp.status_code}): {resp.text}") from e

    def search(self, kind: str, query: str, *, limit: Optional[int] = None) -> Dict[str, Any]:
        """Search one resource kind and return the raw response body."""

        if kind not in SEARCH_KINDS:
            raise ValueError(f"Unsupported search type: {kind!r} (expected one of {SEARCH_KINDS})")

        if limit is None:
            limit = int(self.config.get("search_limit", DEFAULT_SEARCH_LIMIT))

        return self.request_json("GET", "/search", params={"type": kind, "q": query, "limit": limit})

    def me(self) -> Dict[str, Any]:
        return self.request_json("GET", "/me")
