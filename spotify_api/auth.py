import base64
import hashlib
import json
import logging
import secrets
import urllib.parse
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional

import httpx

from .errors import SpotifyError, SpotifyNetworkError, TokenExchangeError

logger = logging.getLogger(__name__)

SPOTIFY_ACCOUNTS_BASE_URL = "https://accounts.spotify.com"
AUTHORIZE_URL = f"{SPOTIFY_ACCOUNTS_BASE_URL}/authorize"
TOKEN_URL = f"{SPOTIFY_ACCOUNTS_BASE_URL}/api/token"

DEFAULT_REDIRECT_URI = "http://127.0.0.1:8888/callback"

# RFC 7636 "unreserved" characters.
VERIFIER_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789-._~"
VERIFIER_MIN_LENGTH = 43
VERIFIER_MAX_LENGTH = 128


def _base64url_no_pad(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).decode("utf-8").rstrip("=")


def generate_verifier(length: int = VERIFIER_MAX_LENGTH) -> str:
    """Return a random PKCE code_verifier of exactly ``length`` characters."""

    length = int(length)
    if not VERIFIER_MIN_LENGTH <= length <= VERIFIER_MAX_LENGTH:
        raise ValueError(
            f"code_verifier length must be {VERIFIER_MIN_LENGTH}-{VERIFIER_MAX_LENGTH}, got {length}"
        )
    return "".join(secrets.choice(VERIFIER_ALPHABET) for _ in range(length))


def code_challenge_from_verifier(verifier: str) -> str:
    """Compute PKCE S256 code_challenge from code_verifier."""

    digest = hashlib.sha256((verifier or "").encode("utf-8")).digest()
    return _base64url_no_pad(digest)


def parse_callback(callback: str) -> Dict[str, str]:
    """Parse a redirect URL or bare query string into {"code", "state", "error"}.

    Missing keys are omitted. Accepts "http://host/cb?code=..", "?code=.." and "code=..".
    """

    text = str(callback or "").strip()
    if not text:
        return {}

    if "://" in text:
        query = urllib.parse.urlparse(text).query
    else:
        query = text.split("?", 1)[1] if "?" in text else text

    qs = urllib.parse.parse_qs(query)
    out: Dict[str, str] = {}
    for key in ("code", "state", "error"):
        if qs.get(key):
            out[key] = str(qs[key][0])
    return out


def check_spotify_credentials(config: Dict[str, Any]) -> Dict[str, Any]:
    """Validate Spotify OAuth config fields and return a structured status dict."""

    config = config or {}
    client_id = str(config.get("spotify_client_id", "")).strip()
    redirect_uri = str(config.get("spotify_redirect_uri", "")).strip()
    scopes = list(config.get("spotify_scopes", []) or [])

    status = {
        "ok": False,
        "client_id": client_id,
        "redirect_uri": redirect_uri,
        "scopes": scopes,
    }

    if not client_id:
        status["message"] = "Missing spotify_client_id in config.json."
        return status

    if not redirect_uri:
        status["message"] = (
            "Missing spotify_redirect_uri in config.json.\n"
            f"Recommended default: {DEFAULT_REDIRECT_URI}"
        )
        return status

    status["ok"] = True
    status["message"] = "Spotify credentials look OK."
    return status


def spotify_app_setup_instructions(*, redirect_uri: str = DEFAULT_REDIRECT_URI) -> str:
    """Return user-facing setup instructions for creating a Spotify Developer app."""

    redirect_uri = str(redirect_uri or "").strip() or DEFAULT_REDIRECT_URI
    return (
        "Spotify app setup:\n"
        "1) Go to https://developer.spotify.com/dashboard\n"
        "2) Create an app (or select an existing app)\n"
        f"3) Add this Redirect URI in the app settings: {redirect_uri}\n"
        "4) Copy the Client ID into config.json as spotify_client_id\n\n"
        "Notes:\n"
        "- Login uses Authorization Code + PKCE (no client secret required).\n"
        "- Redirect URI must match *exactly* what you configure in the Spotify dashboard.\n"
        "- With spotify_callback_mode=local_server the redirect URI must point at this machine.\n"
    )


@dataclass(frozen=True)
class PKCEPair:
    code_verifier: str
    code_challenge: str


def generate_pkce_pair(length: int = VERIFIER_MAX_LENGTH) -> PKCEPair:
    verifier = generate_verifier(length)
    return PKCEPair(code_verifier=verifier, code_challenge=code_challenge_from_verifier(verifier))


class SpotifyPKCEAuth:
    """Spotify OAuth (Authorization Code + PKCE) protocol helper.

    Builds the authorize URL and performs the code-for-token exchange. It keeps
    no session state of its own; see ``AuthSession`` for that.
    """

    def __init__(self, config: Dict[str, Any], *, transport: Optional[httpx.BaseTransport] = None):
        self.config = config or {}
        self.transport = transport

    @property
    def client_id(self) -> str:
        return str(self.config.get("spotify_client_id", "")).strip()

    @property
    def redirect_uri(self) -> str:
        return str(self.config.get("spotify_redirect_uri", "")).strip()

    def get_authorize_url(
        self,
        *,
        code_challenge: str,
        state: Optional[str] = None,
        scopes: Optional[Iterable[str]] = None,
    ) -> str:
        if not self.client_id:
            raise ValueError("Missing config.spotify_client_id")
        if not self.redirect_uri:
            raise ValueError("Missing config.spotify_redirect_uri")

        scope_list = list(scopes if scopes is not None else self.config.get("spotify_scopes", []))
        scope_str = " ".join([str(s).strip() for s in scope_list if str(s).strip()])

        params: Dict[str, str] = {
            "client_id": self.client_id,
            "response_type": "code",
            "redirect_uri": self.redirect_uri,
            "code_challenge_method": "S256",
            "code_challenge": str(code_challenge),
            "scope": scope_str,
        }
        if state:
            params["state"] = str(state)

        return f"{AUTHORIZE_URL}?{urllib.parse.urlencode(params)}"

    def exchange_code_for_token(self, *, code: str, code_verifier: str) -> Dict[str, Any]:
        """POST the authorization code + verifier and return the token JSON."""

        return self._post_form(
            TOKEN_URL,
            {
                "client_id": self.client_id,
                "grant_type": "authorization_code",
                "code": code,
                "redirect_uri": self.redirect_uri,
                "code_verifier": code_verifier,
            },
        )

    def _post_form(self, url: str, form: Dict[str, Any]) -> Dict[str, Any]:
        data = {k: str(v) for k, v in (form or {}).items() if v is not None}
        timeout = float(self.config.get("spotify_request_timeout", 30.0))

        try:
            with httpx.Client(timeout=timeout, follow_redirects=False, transport=self.transport) as client:
                resp = client.post(
                    url,
                    data=data,
                    headers={"Content-Type": "application/x-www-form-urlencoded"},
                )
        except httpx.HTTPError as e:
            raise SpotifyNetworkError(f"Token request failed: {e}") from e

        if resp.status_code >= 400:
            logger.debug("Token endpoint returned HTTP %s", resp.status_code)
            raise TokenExchangeError(resp.status_code, resp.text)

        try:
            payload = resp.json()
        except json.JSONDecodeError as e:
            raise SpotifyError(f"Spotify token response was not JSON: {resp.text}") from e

        if not isinstance(payload, dict):
            raise SpotifyError(f"Spotify token response was not an object: {payload}")

        return payload
