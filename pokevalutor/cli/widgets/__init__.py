from pokevalutor.cli.widgets.results_table import ResultsTable
from pokevalutor.cli.widgets.search_input import SearchInput
from pokevalutor.cli.widgets.status_bar import StatusBar
from pokevalutor.cli.widgets.title_bar import TitleBar

__all__ = ["ResultsTable", "SearchInput", "StatusBar", "TitleBar"]
