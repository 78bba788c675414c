import argparse
import json
import sys

from config import CONFIG_PATH, load_config
from menus import main_menu as mm
from menus.auth_menu import (
    handle_redirect_callback,
    login_flow,
    logout_flow,
    paste_callback_flow,
    session_status,
    spotify_setup_help,
)
from menus.config_menu import config_menu
from menus.results_menu import results_menu, toggle_results
from menus.search_menu import search_menu, show_profile
from spotify_api.client import SpotifyClient
from spotify_api.results import ResultSet
from spotify_api.session import AuthSession
from spotify_api.storage import LocalStorage
from utils.logger import setup_logging, log_info, log_error
from utils.presenter import ResultPresenter


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Log in to Spotify with PKCE and search tracks, albums and playlists.")
    parser.add_argument("--config", default=CONFIG_PATH, help=f"Path to the config file (default: {CONFIG_PATH})")
    parser.add_argument(
        "--callback-url",
        default="",
        help="Redirect URL Spotify sent you back to (completes a login started earlier)",
    )
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    setup_logging()

    try:
        config = load_config(args.config)
    except FileNotFoundError as e:
        log_error(f"Config file not found: {e}")
        log_error("Please create config.json with required settings.")
        return 1
    except json.JSONDecodeError as e:
        log_error(f"Config file contains invalid JSON: {e}")
        return 1

    setup_logging(config.get("log_level", "INFO"), config.get("log_file") or None)

    session = AuthSession(config, storage=LocalStorage.from_config(config))
    client = SpotifyClient(session, config)
    results = ResultSet()
    presenter = ResultPresenter(results, title_width=config.get("title_width", 48))

    # Same order as a page load: adopt a saved token, then look at the redirect.
    session.restore_token()
    if args.callback_url:
        handle_redirect_callback(session, args.callback_url)

    while True:
        choice = mm.main_menu(session, session_status(session))

        if choice == mm.LOGIN:
            login_flow(config, session)

        elif choice == mm.PASTE_CALLBACK:
            paste_callback_flow(session)

        elif choice == mm.LOGOUT:
            logout_flow(session)

        elif choice in mm.SEARCH_CHOICES:
            search_menu(config, client, results, presenter, mm.SEARCH_CHOICES[choice])

        elif choice == mm.BROWSE_RESULTS:
            results_menu(presenter)

        elif choice == mm.TOGGLE_RESULTS:
            toggle_results(presenter)

        elif choice == mm.PROFILE:
            show_profile(client)

        elif choice == mm.SETUP_HELP:
            spotify_setup_help(config)

        elif choice == mm.CONFIG:
            config_menu(config, args.config)
            presenter.title_width = int(config.get("title_width", presenter.title_width))

        elif choice in (mm.EXIT, None):
            log_info("Exiting program...")
            break

        else:
            log_error("Invalid choice.")

    return 0


if __name__ == "__main__":
    sys.exit(main())
