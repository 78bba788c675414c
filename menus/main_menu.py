import questionary

from spotify_api.session import AuthSession, SessionState

LOGIN = "Log in with Spotify"
PASTE_CALLBACK = "Paste Spotify redirect URL"
LOGOUT = "Log out"
SEARCH_TRACKS = "Search tracks"
SEARCH_ALBUMS = "Search albums"
SEARCH_PLAYLISTS = "Search playlists"
BROWSE_RESULTS = "Browse results"
TOGGLE_RESULTS = "Show / hide results"
PROFILE = "Show my profile"
SETUP_HELP = "Spotify API setup help"
CONFIG = "Config Menu"
EXIT = "Exit"

SEARCH_CHOICES = {
    SEARCH_TRACKS: "track",
    SEARCH_ALBUMS: "album",
    SEARCH_PLAYLISTS: "playlist",
}


def build_choices(session: AuthSession) -> list:
    """Main menu entries, enabled or disabled from the current session state."""
    logged_in = session.state == SessionState.LOGGED_IN
    can_paste = session.state == SessionState.AWAITING_REDIRECT or session.has_pending_login
    need_login = None if logged_in else "log in first"

    return [
        questionary.Choice(LOGIN, disabled="already logged in" if logged_in else None),
        questionary.Choice(PASTE_CALLBACK, disabled=None if can_paste else "no login in progress"),
        questionary.Choice(LOGOUT, disabled=None if logged_in else "not logged in"),
        questionary.Separator(),
        questionary.Choice(SEARCH_TRACKS, disabled=need_login),
        questionary.Choice(SEARCH_ALBUMS, disabled=need_login),
        questionary.Choice(SEARCH_PLAYLISTS, disabled=need_login),
        questionary.Choice(BROWSE_RESULTS),
        questionary.Choice(TOGGLE_RESULTS),
        questionary.Choice(PROFILE, disabled=need_login),
        questionary.Separator(),
        questionary.Choice(SETUP_HELP),
        questionary.Choice(CONFIG),
        questionary.Choice(EXIT),
    ]


def main_menu(session: AuthSession, status: str = "") -> str:
    """Displays the main menu and returns the selected entry."""
    title = "🎧 Spotify Search — What would you like to do?"
    if status:
        title = f"{title}  [{status}]"
    return questionary.select(title, choices=build_choices(session)).ask()
