import webbrowser

import questionary

from spotify_api.auth import check_spotify_credentials, parse_callback, spotify_app_setup_instructions
from spotify_api.callback_server import CallbackReceiver
from spotify_api.errors import SpotifyError
from spotify_api.session import AuthSession, SessionState
from utils.logger import log_info, log_warning, log_error, log_success


def session_status(session: AuthSession) -> str:
    if session.state == SessionState.LOGGED_IN:
        return "Logged in."
    if session.state == SessionState.AWAITING_REDIRECT:
        return "Waiting for Spotify to redirect back..."
    return "(Not logged in)"


def spotify_setup_help(config: dict) -> None:
    creds = check_spotify_credentials(config)
    log_info("\n" + "=" * 72)
    log_info("SPOTIFY WEB API SETUP")
    log_info("=" * 72)
    log_info(spotify_app_setup_instructions(redirect_uri=creds.get("redirect_uri")))
    log_info("Current config status:")
    log_info(f"- spotify_client_id: {creds.get('client_id') or 'NOT SET'}")
    log_info(f"- spotify_redirect_uri: {creds.get('redirect_uri') or ''}")
    log_info(f"- spotify_scopes: {', '.join(creds.get('scopes') or [])}")
    log_info(f"- spotify_callback_mode: {config.get('spotify_callback_mode', 'paste')}")
    log_info("")
    if not creds.get("ok"):
        log_warning(creds.get("message") or "Spotify credentials are incomplete.")
    else:
        log_info(creds.get("message") or "Spotify credentials look OK.")
    log_info("=" * 72 + "\n")


def handle_redirect_callback(session: AuthSession, callback: str) -> bool:
    """Feed a redirect URL / query string to the session and report the outcome.

    Returns True when the session ends up logged in by this callback.
    """
    try:
        token = session.complete_login(callback)
    except SpotifyError as e:
        log_error(str(e))
        return False

    if token is None:
        return False

    log_success("Logged in!")
    return True


def _wait_for_local_callback(config: dict, auth_url: str):
    try:
        receiver = CallbackReceiver(config.get("spotify_redirect_uri", ""))
    except (OSError, ValueError) as e:
        log_error(f"Could not start local callback listener: {e}")
        return None

    timeout = float(config.get("spotify_callback_timeout", 120))
    with receiver:
        log_info(f"Listening on port {receiver.port} for up to {int(timeout)}s...")
        try:
            webbrowser.open(auth_url)
        except webbrowser.Error as e:
            log_warning(f"Could not open a browser ({e}); open the URL above manually.")
        return receiver.wait(timeout)


def _ask_for_pasted_callback(auth_url: str):
    if questionary.confirm("Open the authorize URL in your default browser?", default=True).ask():
        try:
            webbrowser.open(auth_url)
        except webbrowser.Error as e:
            log_warning(f"Could not open a browser ({e}); open the URL above manually.")

    pasted = questionary.text("Paste the full redirect URL (or just its ?code=... part):").ask()
    return (pasted or "").strip()


def login_flow(config: dict, session: AuthSession) -> bool:
    """Interactive PKCE login: open the authorize URL, then complete with the redirect."""
    creds = check_spotify_credentials(config)
    if not creds.get("ok"):
        log_warning(creds.get("message") or "Spotify credentials are incomplete.")
        spotify_setup_help(config)
        return False

    try:
        auth_url = session.begin_login()
    except ValueError as e:
        log_error(f"Cannot start Spotify login: {e}")
        return False

    log_info("\n" + "=" * 72)
    log_info("SPOTIFY LOGIN")
    log_info("=" * 72)
    log_info(f"Authorize URL:\n{auth_url}")
    log_info("=" * 72)

    if config.get("spotify_callback_mode") == "local_server":
        callback = _wait_for_local_callback(config, auth_url)
    else:
        callback = _ask_for_pasted_callback(auth_url)

    if not callback:
        log_warning("No redirect received. Use 'Paste Spotify redirect URL' once you have it.")
        return False

    return complete_login_flow(session, callback)


def complete_login_flow(session: AuthSession, callback: str) -> bool:
    if not parse_callback(callback).keys() & {"code", "error"}:
        log_error("Could not find an authorization code. Paste the redirect URL that contains ?code=...")
        return False
    return handle_redirect_callback(session, callback)


def paste_callback_flow(session: AuthSession) -> bool:
    pasted = questionary.text("Paste the full redirect URL (or just its ?code=... part):").ask()
    pasted = (pasted or "").strip()
    if not pasted:
        return False
    return complete_login_flow(session, pasted)


def logout_flow(session: AuthSession) -> None:
    session.logout()
    log_info("(Not logged in)")
