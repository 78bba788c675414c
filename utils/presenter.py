from typing import List, Optional

from spotify_api.normalizer import SearchResultItem
from spotify_api.results import ResultSet
from utils.logger import log_debug, log_info

DEFAULT_TITLE_WIDTH = 48
EXTRA_SEPARATOR = " • "


def truncate_for_display(text: str, width: int) -> str:
    """Shorten text to ``width`` columns with an ellipsis; the input is left as-is."""
    text = text or ""
    width = int(width)
    if width <= 0 or len(text) <= width:
        return text
    if width == 1:
        return "…"
    return text[: width - 1].rstrip() + "…"


class ResultPresenter:
    """Renders a ResultSet as a status line plus one text tile per item.

    This is the only piece that decides how results look in the terminal.
    """

    def __init__(self, result_set: ResultSet, *, title_width: int = DEFAULT_TITLE_WIDTH, hidden: bool = False):
        self.result_set = result_set
        self.title_width = int(title_width)
        self.hidden = hidden

    def status_line(self) -> str:
        count = len(self.result_set)
        if count == 0:
            return "No results found."
        kind = self.result_set.kind
        type_label = f"{kind}s" if kind else "items"
        return f"Found {count} {type_label}."

    def format_row(self, index: int, item: SearchResultItem) -> str:
        extra = f"{EXTRA_SEPARATOR}{item.extra}" if item.extra else ""
        return (
            f"{index + 1}. {truncate_for_display(item.title, self.title_width)}\n"
            f"    {item.subtitle}{extra}\n"
            f"    cover: {item.cover_image_url}"
        )

    def render_rows(self) -> List[str]:
        return [self.format_row(i, item) for i, item in enumerate(self.result_set)]

    def render(self) -> str:
        lines = [self.status_line()]
        lines.extend(self.render_rows())
        return "\n".join(lines)

    def show(self) -> None:
        # The status line is always reported; hiding only suppresses the rows.
        if self.hidden:
            log_info(self.status_line())
            log_debug("Results hidden; skipping rows")
            return
        log_info(self.render())

    def toggle_visibility(self) -> bool:
        """Flip hidden/visible; returns True when results are now visible."""
        self.hidden = not self.hidden
        return not self.hidden

    def select(self, index: int) -> Optional[SearchResultItem]:
        # Selecting a row only logs it; there is no playback behind it.
        items = self.result_set.items
        if not 0 <= index < len(items):
            return None
        item = items[index]
        log_debug(f"Clicked item: {item}")
        return item
