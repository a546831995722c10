from pokevalutor.cli.app import PokeValutorApp
from pokevalutor.cli.console import console
from pokevalutor.cli.output import display_prices, display_results_table


__all__ = ["PokeValutorApp", "console", "display_prices", "display_results_table"]
