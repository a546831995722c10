import logging
from pathlib import Path
from typing import Literal

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.reactive import reactive
from textual.screen import Screen
from textual.widgets import Input

from pokevalutor.cli.screens import SearchScreen
from pokevalutor.cli.ui.messages import (
    PricesRequested,
    SearchInputFocused,
    SearchSubmitted,
)
from pokevalutor.cli.ui.mode_state import ModeState
from pokevalutor.cli.widgets import StatusBar, TitleBar
from pokevalutor.services.cache import ResponseCache
from pokevalutor.services.fetcher import FetchOrchestrator, make_client
from pokevalutor.usecases.card_prices import CardPriceLookup, PriceLookupError
from pokevalutor.usecases.diagnostics import check_connection, check_health
from pokevalutor.usecases.search_cards import SearchResolver


LOG = logging.getLogger(__name__)


def _user_message(operation: str, error: Exception) -> str:
    LOG.exception("%s failed", operation)

    if str(error).strip():
        return f"{operation} failed: {error}"
    return f"{operation} failed. Please try again."


CSS_FILE = Path(__file__).parent / "app.tcss"

SEARCH_HINTS = "/: search  Enter: prices  h: health  t: test  q: quit"
INSERT_HINTS = "Enter: search  Esc: back"


class RootScreen(Screen):
    can_focus = True
    mode_state = reactive(ModeState(mode="NAV", breadcrumb="Search", hints=SEARCH_HINTS))

    BINDINGS = [
        ("q", "quit", "Quit"),
        ("/", "focus_search", "Search"),
        ("h", "health", "Health check"),
        ("t", "test_connection", "Connection test"),
        Binding("escape", "blur_search", "Blur", priority=True),
    ]

    def __init__(
        self, resolver: SearchResolver, prices: CardPriceLookup, *args, **kwargs
    ) -> None:
        super().__init__(*args, **kwargs)
        self.resolver = resolver
        self.prices = prices

    @property
    def base_url(self) -> str:
        return self.resolver.orchestrator.base_url

    def compose(self) -> ComposeResult:
        with Vertical(id="app-root"):
            yield TitleBar(self.base_url)
            yield SearchScreen(id="search-screen", classes="screen")
            yield StatusBar()

    def on_mount(self) -> None:
        self.query_one("#search-input", Input).focus()
        self._set_mode(mode="INSERT", hints=INSERT_HINTS)

    def watch_mode_state(self, state: ModeState) -> None:
        self._sync_status()

    def _sync_status(self) -> None:
        self.query_one(StatusBar).update_from_state(self.mode_state)

    def _set_mode(self, mode: str | None = None, hints: str | None = None) -> None:
        self.mode_state = ModeState(
            mode=mode or self.mode_state.mode,
            breadcrumb=self.mode_state.breadcrumb,
            hints=hints or self.mode_state.hints,
        )

    def _notify(
        self,
        message: str,
        kind: Literal["success", "info", "warning", "error"] = "info",
        title: str | None = None,
    ) -> None:
        severity_map = {
            "success": "information",
            "info": "information",
            "warning": "warning",
            "error": "error",
        }
        severity = severity_map[kind]

        if kind == "error" and title is None:
            title = "Error"

        self.notify(message, severity=severity, title=title)

    def on_search_submitted(self, message: SearchSubmitted) -> None:
        self._set_mode(mode="NAV", hints="Searching...")
        self.query_one("#search-screen", SearchScreen).set_status("Searching…")
        # The resolver supersedes older searches itself, so workers are not exclusive.
        self.run_worker(self._run_search(message.query), group="search")

    async def _run_search(self, query: str) -> None:
        try:
            outcome = await self.resolver.resolve(query)
        except Exception as e:
            self._notify(_user_message("Search", e), "error")
            self._set_mode(hints=SEARCH_HINTS)
            return

        if outcome is None:
            return

        self.query_one("#search-screen", SearchScreen).render_outcome(outcome)
        self._set_mode(hints=SEARCH_HINTS)

    def on_prices_requested(self, message: PricesRequested) -> None:
        search_screen = self.query_one("#search-screen", SearchScreen)

        if not message.card.variants:
            search_screen.show_prices("No variants")
            return

        search_screen.show_prices("Loading prices…")
        self.run_worker(self._load_prices(message.card.id), group="prices")

    async def _load_prices(self, card_id: str) -> None:
        search_screen = self.query_one("#search-screen", SearchScreen)
        try:
            variant_prices = await self.prices.variant_prices(card_id)
        except PriceLookupError:
            LOG.warning("Price lookup failed for %s", card_id, exc_info=True)
            search_screen.show_prices("Unable to load prices.")
            return

        if variant_prices is None:
            return

        blocks = [f"{name}\n{text}" for name, text in variant_prices.items()]
        search_screen.show_prices("\n\n".join(blocks) or "No price data available.")

    def on_search_input_focused(self, _: SearchInputFocused) -> None:
        self.query_one("#search-input", Input).focus()
        self._set_mode(mode="INSERT", hints=INSERT_HINTS)

    def action_focus_search(self) -> None:
        self.post_message(SearchInputFocused())

    def action_blur_search(self) -> None:
        search_input = self.query_one("#search-input", Input)
        if self.app.focused is search_input:
            search_input.blur()
            self._set_mode(mode="NAV", hints=SEARCH_HINTS)

    def action_health(self) -> None:
        self._notify("Checking worker health…")
        self.run_worker(
            self._run_diagnostic("Health check", check_health), group="diagnostics"
        )

    def action_test_connection(self) -> None:
        self._notify("Testing connection…")
        self.run_worker(
            self._run_diagnostic("Connection test", check_connection),
            group="diagnostics",
        )

    async def _run_diagnostic(self, title: str, check) -> None:
        client = self.resolver.orchestrator.client
        try:
            report = await check(client, self.base_url)
        except Exception as e:
            self._notify(_user_message(title, e), "error")
            return

        self._notify(report.message, "success" if report.ok else "warning", title=title)

    def action_quit(self) -> None:
        self.app.exit()


class PokeValutorApp(App):
    CSS_PATH = str(CSS_FILE)
    TITLE = "PokeValutor Card Search"

    def __init__(self, base_url: str | None = None, cache: ResponseCache | None = None) -> None:
        super().__init__()
        self.client = make_client()
        orchestrator = FetchOrchestrator(self.client, cache or ResponseCache(), base_url)
        self.resolver = SearchResolver(orchestrator)
        self.prices = CardPriceLookup(orchestrator)

    async def on_mount(self) -> None:
        await self.push_screen(RootScreen(self.resolver, self.prices))

    async def on_unmount(self) -> None:
        self.resolver.cancel()
        await self.client.aclose()
