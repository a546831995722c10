from rich.table import Table

from pokevalutor.cli.console import console
from pokevalutor.models.cards import SearchOutcome


def display_results_table(outcome: SearchOutcome) -> None:
    if not outcome.results:
        console.print(f"[yellow]{outcome.status_message}[/yellow]")
        return

    table = Table(
        title="[bold cyan]Pokémon Card Search - Scrydex[/bold cyan]",
        show_header=True,
        header_style="bold magenta",
        border_style="blue",
        title_style="bold cyan",
    )

    table.add_column("Card Name", style="cyan", no_wrap=False, width=32)
    table.add_column("Number", style="green", width=10)
    table.add_column("Set", style="white", width=24)
    table.add_column("Rarity", style="blue", width=20)
    table.add_column("Variants", style="bold yellow", width=30)
    table.add_column("ID", style="dim", width=16)

    for card in outcome.results:
        table.add_row(
            card.name,
            card.printed_number or card.number,
            card.expansion_name,
            card.rarity or "n/a",
            ", ".join(card.variant_names) or "[dim]No variants[/dim]",
            card.id,
        )

    console.print()
    console.print(table)
    console.print(f"\n[green]{outcome.status_message}[/green]")


def display_prices(card_id: str, variant_prices: dict[str, str]) -> None:
    if not variant_prices:
        console.print(f"[yellow]No variants with prices for {card_id}.[/yellow]")
        return

    for name, text in variant_prices.items():
        console.print(f"[bold cyan]{name}[/bold cyan]")
        console.print(text, markup=False)
