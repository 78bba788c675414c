import logging
from enum import Enum
from typing import Any, Dict, Optional

import httpx

from .auth import SpotifyPKCEAuth, generate_pkce_pair, parse_callback
from .errors import AuthorizationError, MissingVerifierError, SpotifyError
from .storage import ACCESS_TOKEN_KEY, CODE_VERIFIER_KEY, LocalStorage

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    LOGGED_OUT = "logged_out"
    AWAITING_REDIRECT = "awaiting_redirect"
    LOGGED_IN = "logged_in"


class AuthSession:
    """Holds the bearer token and drives the PKCE login as two explicit steps.

    ``begin_login()`` returns the URL the user must open; ``complete_login()``
    consumes whatever Spotify redirected back with. Between the two the only
    state carried over is the code_verifier in storage.
    """

    def __init__(
        self,
        config: Dict[str, Any],
        *,
        storage: Optional[LocalStorage] = None,
        auth: Optional[SpotifyPKCEAuth] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.config = config or {}
        self.storage = storage or LocalStorage.from_config(self.config)
        self.auth = auth or SpotifyPKCEAuth(self.config, transport=transport)
        self._access_token: Optional[str] = None
        self._awaiting_redirect = False

    @property
    def access_token(self) -> Optional[str]:
        return self._access_token

    @property
    def is_logged_in(self) -> bool:
        return bool(self._access_token)

    @property
    def state(self) -> SessionState:
        if self._access_token:
            return SessionState.LOGGED_IN
        if self._awaiting_redirect:
            return SessionState.AWAITING_REDIRECT
        return SessionState.LOGGED_OUT

    @property
    def has_pending_login(self) -> bool:
        """True while a stored verifier could still complete a login from a pasted redirect."""
        return not self._access_token and bool(self.storage.get_item(CODE_VERIFIER_KEY))

    def restore_token(self) -> bool:
        """Adopt a previously persisted token, if any. The token is not validated."""

        stored = self.storage.get_item(ACCESS_TOKEN_KEY)
        if stored:
            self._access_token = stored
            logger.debug("Restored persisted access token")
            return True
        return False

    def begin_login(self) -> str:
        """Create and persist a PKCE verifier, return the authorize URL."""

        pkce = generate_pkce_pair()
        self.storage.set_item(CODE_VERIFIER_KEY, pkce.code_verifier)
        url = self.auth.get_authorize_url(code_challenge=pkce.code_challenge)
        self._awaiting_redirect = True
        return url

    def complete_login(self, callback: Optional[str]) -> Optional[str]:
        """Handle the redirect back from Spotify.

        Returns the new access token, or None when the callback carries no
        ``code`` (nothing to do). Raises a ``SpotifyError`` subclass on failure,
        leaving the session logged out.
        """

        params = parse_callback(callback or "")

        if params.get("error"):
            self._awaiting_redirect = False
            raise AuthorizationError(params["error"])

        code = params.get("code")
        if not code:
            return None

        verifier = self.storage.get_item(CODE_VERIFIER_KEY)
        if not verifier:
            self._awaiting_redirect = False
            raise MissingVerifierError()

        try:
            payload = self.auth.exchange_code_for_token(code=code, code_verifier=verifier)
        finally:
            self._awaiting_redirect = False

        token = str(payload.get("access_token") or "")
        if not token:
            raise SpotifyError(f"Spotify token exchange failed: {payload}")

        self._access_token = token
        self.storage.set_item(ACCESS_TOKEN_KEY, token)
        self.storage.remove_item(CODE_VERIFIER_KEY)
        logger.debug("Token exchange succeeded; session is logged in")
        return token

    def logout(self) -> None:
        self._access_token = None
        self._awaiting_redirect = False
        self.storage.remove_item(ACCESS_TOKEN_KEY)
