#!/usr/bin/env python
"""Play one game of chopsticks and print the transcript.

Usage:
    python -m chopsticks.scripts.play --agents human,monte_carlo --sims 50
    python -m chopsticks.scripts.play --players 3 --agents random --seed 7
    python -m chopsticks.scripts.play --help
"""

import argparse
import logging
import sys

import numpy as np
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from chopsticks.rules import ChopsticksConfig, ConfigError, DEFAULT_CONFIG, describe_action
from chopsticks.utils.seeding import set_seed
from chopsticks.engine.game import Game, GameOutcome, GameResult
from chopsticks.engine.game_state import GameState
from chopsticks.scripts.evaluate import (
    DEFAULT_MAX_TURNS,
    DEFAULT_SIMS,
    add_config_arguments,
    config_from_args,
    create_agent,
    parse_agent_types,
)

logger = logging.getLogger(__name__)


def render_result(result: GameResult, agent_types: list[str]) -> Panel:
    """Build the final standings panel."""
    table = Table(title="Final Results", box=box.SIMPLE, show_header=True)
    table.add_column("Rank", justify="right")
    table.add_column("Seat", justify="right")
    table.add_column("Agent")
    for player_id in sorted(range(len(result.ranks)), key=lambda i: (result.ranks[i], i)):
        table.add_row(str(result.ranks[player_id]), f"P{player_id}", agent_types[player_id])

    if result.outcome == GameOutcome.WIN:
        title = f"Player {result.winner_id} wins after {result.turns} turns"
    elif result.outcome == GameOutcome.CYCLE:
        title = f"Known cycle reached after {result.turns} turns, no winner"
    else:
        title = f"Turn cap reached after {result.turns} turns, no winner"
    return Panel(table, title=title, border_style="green")


def play_game(
    agent_types: list[str],
    config: ChopsticksConfig = DEFAULT_CONFIG,
    n_sims: int = DEFAULT_SIMS,
    seed: int | None = None,
    max_turns: int | None = DEFAULT_MAX_TURNS,
    console: Console | None = None,
) -> GameResult:
    """Play one game, printing every action as it happens.

    Args:
        agent_types: Agent types by player id (missing seats repeat the last)
        config: Rule configuration
        n_sims: Rollouts per action for Monte-Carlo agents
        seed: Random seed for reproducibility
        max_turns: Turn cap (None = no cap)
        console: Console for the transcript (default: a new Console)

    Returns:
        GameResult of the finished game
    """
    console = console or Console()
    agent_types = parse_agent_types(",".join(agent_types), config.n_players)

    if seed is not None:
        set_seed(seed)
        logger.info("Seeded random and numpy with %d", seed)
    rng = np.random.default_rng(seed)
    agents = []
    for agent_type in agent_types:
        agent_seed = int(rng.integers(0, 2**31)) if seed is not None else None
        agents.append(create_agent(agent_type, seed=agent_seed, n_sims=n_sims, console=console))

    game = Game(GameState.new_game(config), agents, max_turns=max_turns)
    console.print(Panel(f"[bold cyan]Chopsticks[/bold cyan] {config}", box=box.HEAVY))
    console.print(f"Start: {game.state.abbreviation()}")

    while not game.state.is_game_over() and not game.is_cycle():
        if max_turns is not None and game.turns >= max_turns:
            break
        action = game.play_next_action()
        player_id = game.history[-1][0]
        console.print(
            f"[dim]{game.turns:>3}[/dim] {describe_action(action, player_id)}"
            f"  [bold]{game.state.abbreviation()}[/bold]"
        )

    # Nothing left to play; run() only packages the result
    result = game.run()
    logger.info(
        "Game over: %s after %d turns, winner=%s", result.outcome.value, result.turns, result.winner_id
    )
    console.print(render_result(result, agent_types))
    return result


def main():
    """Main entry point for the play script."""
    parser = argparse.ArgumentParser(
        description="Play a game of chopsticks",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m chopsticks.scripts.play --agents human,monte_carlo --sims 50
  python -m chopsticks.scripts.play --agents monte_carlo,random --seed 42
  python -m chopsticks.scripts.play --players 3 --hands 3 --agents random
        """,
    )
    parser.add_argument(
        "--agents",
        "-a",
        type=str,
        default="human,monte_carlo",
        help="Comma-separated list of agent types: human, random, monte_carlo (default: human,monte_carlo)",
    )
    parser.add_argument(
        "--sims", type=int, default=DEFAULT_SIMS, help="Rollouts per action for monte_carlo agents"
    )
    parser.add_argument(
        "--max-turns",
        type=int,
        default=DEFAULT_MAX_TURNS,
        help=f"Turn cap (default: {DEFAULT_MAX_TURNS})",
    )
    parser.add_argument(
        "--seed", "-s", type=int, default=None, help="Random seed for reproducibility"
    )
    add_config_arguments(parser)
    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    console = Console()
    try:
        play_game(
            agent_types=args.agents.split(","),
            config=config_from_args(args),
            n_sims=args.sims,
            seed=args.seed,
            max_turns=args.max_turns,
            console=console,
        )
    except (ConfigError, ValueError) as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)
    except KeyboardInterrupt:
        console.print("\n[dim]Game cancelled.[/dim]")
        sys.exit(0)


if __name__ == "__main__":
    main()
