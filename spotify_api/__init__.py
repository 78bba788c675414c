"""Spotify Web API integration (OAuth PKCE login + search).

HTTP goes through httpx; everything else is stdlib.
"""

from .auth import SpotifyPKCEAuth
from .client import SpotifyClient
from .results import ResultSet
from .session import AuthSession, SessionState
from .storage import LocalStorage

__all__ = [
    "AuthSession",
    "LocalStorage",
    "ResultSet",
    "SessionState",
    "SpotifyClient",
    "SpotifyPKCEAuth",
]
