import http.server
import logging
import time
import urllib.parse
from typing import Optional

logger = logging.getLogger(__name__)

_SUCCESS_PAGE = b"<h2>Spotify login received. You can close this tab and return to the terminal.</h2>"
_ERROR_PAGE = b"<h2>Spotify reported an error. Return to the terminal for details.</h2>"


class CallbackReceiver:
    """One-shot HTTP listener on the redirect URI that captures Spotify's redirect.

    The socket is bound on construction so ``port`` is known (useful with port 0).
    """

    def __init__(self, redirect_uri: str):
        parsed = urllib.parse.urlparse(str(redirect_uri or "").strip())
        if parsed.scheme != "http" or not parsed.hostname:
            raise ValueError(f"Local callback needs an http:// redirect URI, got: {redirect_uri!r}")

        self.path = parsed.path or "/"
        self.query: Optional[str] = None
        receiver = self

        class _Handler(http.server.BaseHTTPRequestHandler):
            def do_GET(self):
                url = urllib.parse.urlparse(self.path)
                if url.path != receiver.path:
                    self.send_response(404)
                    self.end_headers()
                    return

                receiver.query = url.query
                failed = "error" in urllib.parse.parse_qs(url.query)
                self.send_response(400 if failed else 200)
                self.send_header("Content-Type", "text/html")
                self.end_headers()
                self.wfile.write(_ERROR_PAGE if failed else _SUCCESS_PAGE)

            def log_message(self, format, *args):
                logger.debug("callback server: " + format, *args)

        self._server = http.server.HTTPServer((parsed.hostname, parsed.port if parsed.port is not None else 80), _Handler)

    @property
    def port(self) -> int:
        return int(self._server.server_address[1])

    def close(self) -> None:
        self._server.server_close()

    def __enter__(self) -> "CallbackReceiver":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def wait(self, timeout: float = 120.0) -> Optional[str]:
        """Serve requests until the redirect arrives or ``timeout`` passes.

        Returns the callback query string (without "?"), or None on timeout.
        """

        deadline = time.monotonic() + float(timeout)
        try:
            while self.query is None:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    logger.debug("No callback within %.0fs", float(timeout))
                    break
                self._server.timeout = remaining
                self._server.handle_request()
        finally:
            self.close()
        return self.query
