import json

import questionary

from spotify_api.client import SpotifyClient
from spotify_api.errors import NotLoggedInError, SpotifyAPIError, SpotifyError, SpotifyNetworkError
from spotify_api.normalizer import FALLBACK_IMAGE_URL, normalize
from spotify_api.results import ResultSet
from utils.logger import log_debug, log_info, log_error, log_warning
from utils.presenter import ResultPresenter


def run_search(
    config: dict,
    client: SpotifyClient,
    results: ResultSet,
    presenter: ResultPresenter,
    kind: str,
    query: str,
) -> bool:
    """Search one kind, normalize, replace the result set and render it.

    Every failure ends up as a status message; returns True when results were applied.
    """
    label = kind.capitalize()

    if not client.session.is_logged_in:
        log_warning(str(NotLoggedInError()))
        return False

    request_id = results.begin_request()
    log_info(f"Searching {kind}s...")

    try:
        data = client.search(kind, query)
    except SpotifyError as e:
        if results.is_stale(request_id):
            log_debug(f"Ignoring {kind} search error from an outdated request: {e}")
            return False
        if isinstance(e, NotLoggedInError):
            log_warning(str(e))
        elif isinstance(e, SpotifyAPIError):
            log_error(f"{label} search error: {e.status_code} {e.reason}".rstrip())
        elif isinstance(e, SpotifyNetworkError):
            log_error(f"Network error ({kind}s): {e}")
        else:
            log_error(f"{label} search failed: {e}")
        return False

    items = normalize(kind, data, fallback_image_url=config.get("fallback_image_url") or FALLBACK_IMAGE_URL)
    if not results.replace(kind, items, request_id=request_id):
        return False

    presenter.show()
    log_debug(f"Current results: {results.items}")
    return True


def search_menu(config: dict, client: SpotifyClient, results: ResultSet, presenter: ResultPresenter, kind: str) -> None:
    query = questionary.text(f"Search {kind}s:").ask()
    query = (query or "").strip()
    if not query:
        return
    run_search(config, client, results, presenter, kind, query)


def show_profile(client: SpotifyClient) -> None:
    try:
        profile = client.me()
    except NotLoggedInError as e:
        log_warning(str(e))
        return
    except SpotifyAPIError as e:
        log_error(f"API error: {e.status_code} {e.reason}".rstrip())
        return
    except SpotifyError as e:
        log_error(f"Profile request failed: {e}")
        return

    log_info(json.dumps(profile, indent=2))
