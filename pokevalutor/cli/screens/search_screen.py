from textual.app import ComposeResult
from textual.containers import Container, Horizontal
from textual.widgets import DataTable, Input, Static

from pokevalutor.cli.ui.messages import PricesRequested, SearchSubmitted
from pokevalutor.cli.widgets.results_table import ResultsTable
from pokevalutor.cli.widgets.search_input import SearchInput
from pokevalutor.models.cards import CardResult, SearchOutcome


NO_RESULTS_KEY = "__no-results__"


class SearchScreen(Container):
    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._row_to_card: dict[str, CardResult] = {}

    def compose(self) -> ComposeResult:
        with Horizontal(classes="split", id="search-split"):
            with Container(
                classes="panel split-panel split-panel-left", id="search-main"
            ):
                yield Static("Search", classes="panel-title")
                yield SearchInput(placeholder="Pikachu, 4/102 or SWSH101", id="search-input")
                yield Static("Press Enter to search, / to edit query", classes="muted")
                yield Static("", id="search-status", classes="muted")
                yield ResultsTable(id="results-table")
                yield Static("Enter: load prices  h: health  t: test", classes="muted")
            with Container(classes="panel split-panel", id="search-side"):
                yield Static("Card", classes="panel-title")
                yield Static("", id="card-details")
                yield Static("Prices", classes="panel-title")
                yield Static("", id="card-prices")

    async def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id != "search-input":
            return

        self.post_message(SearchSubmitted(event.input.value))
        event.input.blur()

    def on_data_table_row_highlighted(self, event: DataTable.RowHighlighted) -> None:
        card = self._card_for_key(event.row_key)
        self._show_details(card)

    def on_data_table_row_selected(self, event: DataTable.RowSelected) -> None:
        card = self._card_for_key(event.row_key)
        if card is not None:
            self.post_message(PricesRequested(card))

    def set_status(self, message: str) -> None:
        self.query_one("#search-status", Static).update(message)

    def render_outcome(self, outcome: SearchOutcome) -> None:
        self.set_status(outcome.status_message)
        self._render_results(list(outcome.results))

    def _render_results(self, cards: list[CardResult]) -> None:
        table = self.query_one("#results-table", ResultsTable)
        table.clear(columns=False)
        self._row_to_card.clear()
        self.show_prices("")

        if not cards:
            table.add_row("No results found.", "", "", "", "", key=NO_RESULTS_KEY)
            self._show_details(None)
            return

        for card in cards:
            if card.id in self._row_to_card:
                continue
            self._row_to_card[card.id] = card
            table.add_row(
                card.name,
                card.printed_number or card.number,
                card.expansion_name,
                card.rarity or "n/a",
                ", ".join(card.variant_names) or "No variants",
                key=card.id,
            )

        table.focus()
        table.move_cursor(row=0, column=0, scroll=True)

    def _card_for_key(self, raw_key: object) -> CardResult | None:
        value = getattr(raw_key, "value", raw_key)
        return self._row_to_card.get(str(value))

    def _show_details(self, card: CardResult | None) -> None:
        details = self.query_one("#card-details", Static)
        if card is None:
            details.update("")
            return

        lines = [
            card.name,
            f"Rarity: {card.rarity or 'n/a'}",
            f"Set: {card.expansion_name or 'n/a'} ({card.expansion_id or '?'})",
            f"Number: {card.printed_number or card.number or 'n/a'}",
        ]
        if card.image_url:
            lines.append(f"Image: {card.image_url}")
        if card.variants:
            lines.append("Press Enter to load prices.")
        details.update("\n".join(lines))

    def show_prices(self, text: str) -> None:
        self.query_one("#card-prices", Static).update(text)
