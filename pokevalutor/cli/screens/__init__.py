from pokevalutor.cli.screens.search_screen import SearchScreen

__all__ = ["SearchScreen"]
