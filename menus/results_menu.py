import questionary

from utils.logger import log_info
from utils.presenter import ResultPresenter, truncate_for_display


def results_menu(presenter: ResultPresenter) -> None:
    """Browse the current results. Picking a row only logs it."""
    while True:
        items = presenter.result_set.items
        if not items:
            log_info(presenter.status_line())
            return

        choices = [
            questionary.Choice(
                title=f"{i + 1}. {truncate_for_display(item.title, presenter.title_width)} — {item.subtitle}",
                value=i,
            )
            for i, item in enumerate(items)
        ]
        choices.append(questionary.Choice(title="Back", value=None))

        index = questionary.select(presenter.status_line(), choices=choices).ask()
        if index is None:
            return

        item = presenter.select(index)
        if item is not None:
            log_info(f"Selected: {item.title} ({item.kind} {item.id})")


def toggle_results(presenter: ResultPresenter) -> None:
    if presenter.toggle_visibility():
        log_info("Results are now shown after each search.")
        presenter.show()
    else:
        log_info("Results are now hidden.")
