from textual.app import ComposeResult
from textual.containers import Container, Horizontal
from textual.widgets import Static


class TitleBar(Container):
    def __init__(self, endpoint: str, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.endpoint = endpoint

    def compose(self) -> ComposeResult:
        with Horizontal(id="title-bar"):
            yield Static("PokeValutor Card Search", id="title-left")
            yield Static(self.endpoint, id="title-right")
