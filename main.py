import argparse
import asyncio
import logging

from rich.logging import RichHandler

from pokevalutor.cli import PokeValutorApp, console, display_prices, display_results_table
from pokevalutor.services.cache import ResponseCache
from pokevalutor.services.fetcher import FetchOrchestrator, make_client
from pokevalutor.usecases.card_prices import CardPriceLookup, PriceLookupError
from pokevalutor.usecases.diagnostics import check_connection, check_health
from pokevalutor.usecases.search_cards import SearchResolver
from pokevalutor.utils.constants import LOG_LEVEL


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Search Pokémon cards by name or printed number."
    )
    parser.add_argument("query", nargs="*", help="card name or printed number")
    parser.add_argument("--api-url", help="worker base URL (overrides PV_API_URL)")
    parser.add_argument("--prices", metavar="CARD_ID", help="show variant prices for a card")
    parser.add_argument("--health", action="store_true", help="check worker health")
    parser.add_argument("--test", action="store_true", help="run a connection test")
    parser.add_argument("--clear-cache", action="store_true", help="drop cached responses")
    return parser.parse_args()


async def main(args: argparse.Namespace) -> None:
    cache = ResponseCache()

    if args.clear_cache:
        await cache.clear()
        console.print("[green]Cache cleared.[/green]")

    async with make_client() as client:
        orchestrator = FetchOrchestrator(client, cache, args.api_url)

        if args.health:
            report = await check_health(client, orchestrator.base_url)
            console.print(report.message, markup=False)

        if args.test:
            report = await check_connection(client, orchestrator.base_url)
            console.print(report.message, markup=False)

        if args.prices:
            try:
                variant_prices = await CardPriceLookup(orchestrator).variant_prices(args.prices)
            except PriceLookupError as error:
                console.print(f"[red]Error: {error}[/red]")
            else:
                display_prices(args.prices, variant_prices or {})

        if args.query:
            console.print("[bold cyan]PokeValutor Card Search[/bold cyan]")
            console.print("=" * 60)
            outcome = await SearchResolver(orchestrator).resolve(" ".join(args.query))
            if outcome is not None:
                display_results_table(outcome)


if __name__ == "__main__":
    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(message)s",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )
    args = parse_args()

    if args.query or args.prices or args.health or args.test or args.clear_cache:
        asyncio.run(main(args))
    else:
        PokeValutorApp(base_url=args.api_url).run()
