from textual.message import Message

from pokevalutor.models.cards import CardResult


class SearchSubmitted(Message):
    def __init__(self, query: str) -> None:
        self.query = query
        super().__init__()


class PricesRequested(Message):
    def __init__(self, card: CardResult) -> None:
        self.card = card
        super().__init__()


class SearchInputFocused(Message):
    pass
