from typing import Optional


class SpotifyError(RuntimeError):
    """Base class for every error surfaced to the user as status text."""


class AuthorizationError(SpotifyError):
    """Spotify redirected back with ?error=... (e.g. access_denied)."""

    def __init__(self, error: str):
        self.error = str(error)
        super().__init__(f"Error from Spotify: {self.error}")


class MissingVerifierError(SpotifyError):
    def __init__(self, message: str = "Missing code_verifier. Try logging in again."):
        super().__init__(message)


class TokenExchangeError(SpotifyError):
    def __init__(self, status_code: int, body: str):
        self.status_code = int(status_code)
        self.body = body or ""
        super().__init__(f"Token request failed: {self.status_code}\n{self.body}")


class NotLoggedInError(SpotifyError):
    def __init__(self, message: str = "Please log in with Spotify first."):
        super().__init__(message)


class SpotifyAPIError(SpotifyError):
    """Non-2xx response from the Web API (status code + reason phrase)."""

    def __init__(self, status_code: int, reason: Optional[str] = None):
        self.status_code = int(status_code)
        self.reason = reason or ""
        super().__init__(f"API error: {self.status_code} {self.reason}".rstrip())


class SpotifyNetworkError(SpotifyError):
    """Transport-level failure (DNS, refused connection, timeout...)."""
