"""xypoker/cli.py - Typer-based CLI for the XY Poker engine."""

from pathlib import Path
from typing import Optional

import typer

# Main app
app = typer.Typer(
    name="xypoker",
    help="XY Poker rules engine, AI opponent and simulator",
    rich_markup_mode="rich",
    no_args_is_help=True,
)


@app.command("simulate", help="Play agents against each other")
def simulate(
    agent1: str = typer.Option(
        "heuristic",
        "--agent1",
        help="Agent in seat p1 (heuristic/random)",
    ),
    agent2: str = typer.Option(
        "random",
        "--agent2",
        help="Agent in seat p2 (heuristic/random)",
    ),
    num_games: Optional[int] = typer.Option(
        None,
        "--num-games",
        "-n",
        help="Number of games to simulate (overrides config)",
    ),
    seed: Optional[int] = typer.Option(
        None,
        "--seed",
        help="Seed for a reproducible run (overrides config)",
    ),
    config: Path = typer.Option(
        "config.yaml",
        "--config",
        "-c",
        help="Path to configuration YAML file",
    ),
    learn: bool = typer.Option(
        False,
        "--learn",
        help="Record results for the heuristic agent's learning data",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose console logging (DEBUG)",
    ),
):
    """Run head-to-head matches and print the results."""
    from rich.console import Console
    from rich.table import Table

    from .agents.baseline_agents import AGENT_REGISTRY
    from .config import load_config
    from .constants import DRAW_RESULT, PLAYER_IDS
    from .learning import JoblibWeightPort, WeightStore
    from .logging_setup import setup_logging
    from .simulate import run_matches

    console = Console()
    for agent_type in (agent1, agent2):
        if agent_type.lower() not in AGENT_REGISTRY:
            console.print(
                f"[red]Unknown agent type:[/red] {agent_type}. "
                f"Available: {', '.join(AGENT_REGISTRY)}"
            )
            raise typer.Exit(1)

    cfg = load_config(str(config))
    setup_logging(cfg, verbose)

    games = num_games if num_games is not None else cfg.simulation.num_games
    if games < 1:
        console.print("[red]Number of games must be at least 1.[/red]")
        raise typer.Exit(1)

    store = WeightStore(JoblibWeightPort(cfg.persistence.learning_data_path))
    results = run_matches(
        cfg,
        agent1,
        agent2,
        games,
        seed=seed if seed is not None else cfg.simulation.seed,
        weight_store=store,
        learn=learn,
    )

    table = Table(title=f"{agent1} (p1) vs {agent2} (p2)")
    table.add_column("Result", style="cyan")
    table.add_column("Games", style="green", justify="right")
    table.add_column("Share", style="green", justify="right")
    for key, label in (
        (PLAYER_IDS[0], "p1 wins"),
        (PLAYER_IDS[1], "p2 wins"),
        (DRAW_RESULT, "draws"),
    ):
        table.add_row(label, str(results[key]), f"{results[key] / games:.1%}")
    console.print(table)


@app.command("stats", help="Show the AI's learning record")
def stats(
    config: Path = typer.Option(
        "config.yaml",
        "--config",
        "-c",
        help="Path to configuration YAML file",
    ),
):
    """Display the learning counters, win rate and current weights."""
    from rich.console import Console
    from rich.table import Table

    from .config import load_config
    from .learning import JoblibWeightPort, WeightStore

    console = Console()
    cfg = load_config(str(config))
    store = WeightStore(JoblibWeightPort(cfg.persistence.learning_data_path))
    data = store.data()

    table = Table(title="AI Learning Data")
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Games", str(data.total_games))
    table.add_row("Wins", str(data.wins))
    table.add_row("Losses", str(data.losses))
    table.add_row("Draws", str(data.draws))
    table.add_row("Win Rate", f"{store.win_rate():.1%}")
    for name, value in data.weights.to_dict().items():
        table.add_row(name, f"{value:.3f}")
    console.print(table)


@app.command("reset-learning", help="Delete the AI's learning record")
def reset_learning(
    config: Path = typer.Option(
        "config.yaml",
        "--config",
        "-c",
        help="Path to configuration YAML file",
    ),
    yes: bool = typer.Option(
        False,
        "--yes",
        "-y",
        help="Do not ask for confirmation",
    ),
):
    """Remove the learning data file so the AI starts from default weights."""
    from .config import load_config
    from .persistence import delete_learning_data

    cfg = load_config(str(config))
    path = cfg.persistence.learning_data_path
    if not yes:
        typer.confirm(f"Delete learning data at {path}?", abort=True)
    if delete_learning_data(path):
        typer.echo(f"Deleted learning data at {path}")
    else:
        typer.echo(f"No learning data found at {path}")


@app.command("evaluate-hand", help="Evaluate a 3-card column or a 5-card row")
def evaluate_hand(
    cards: str = typer.Argument(
        ...,
        help="Cards such as 'QS QH QD' or '10S JS QS KS AS'",
    ),
    die: int = typer.Option(
        1,
        "--die",
        "-d",
        min=1,
        max=6,
        help="Die value of the column (3-card hands only)",
    ),
    pure_tier: bool = typer.Option(
        False,
        "--pure-tier",
        help="Rank ordered suited straights above three of a kind",
    ),
):
    """Print the hand type, rank value and kickers."""
    from rich.console import Console
    from rich.table import Table

    from .card import parse_cards
    from .evaluation import evaluate_x_hand, evaluate_y_hand

    console = Console()
    try:
        parsed = parse_cards(cards)
        if len(parsed) == 3:
            result = evaluate_y_hand(parsed, die, pure_straight_flush=pure_tier)
            kind = "Y-hand (column)"
        elif len(parsed) == 5:
            result = evaluate_x_hand(parsed)
            kind = "X-hand (bottom row)"
        else:
            raise ValueError(f"Expected 3 or 5 cards, got {len(parsed)}")
    except ValueError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    table = Table(title=" ".join(str(card) for card in parsed))
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Kind", kind)
    table.add_row("Type", result.hand_type.name)
    table.add_row("Rank Value", str(result.rank_value))
    table.add_row("Kickers", ", ".join(str(k) for k in result.kickers) or "-")
    if len(parsed) == 3:
        table.add_row("Die", str(die))
    console.print(table)


if __name__ == "__main__":
    app()
