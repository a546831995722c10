from pokevalutor.cli.ui.messages import (
    PricesRequested,
    SearchInputFocused,
    SearchSubmitted,
)
from pokevalutor.cli.ui.mode_state import ModeState

__all__ = [
    "ModeState",
    "PricesRequested",
    "SearchInputFocused",
    "SearchSubmitted",
]
