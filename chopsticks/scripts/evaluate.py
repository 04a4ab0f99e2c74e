#!/usr/bin/env python
"""Evaluation script for comparing agents over many games.

This script runs evaluation episodes between agents and collects
placement statistics including:
- Rank distribution per seat
- Wins per seat
- Games stopped at a known cycle or at the turn cap
- Average game length

Usage:
    python -m chopsticks.scripts.evaluate --episodes 100 --agents monte_carlo,random
    python -m chopsticks.scripts.evaluate --episodes 50 --players 3 --agents random --seed 42
    python -m chopsticks.scripts.evaluate --help
"""

import argparse
from collections import defaultdict
from dataclasses import dataclass, field
import logging
import sys

import numpy as np
from rich import box
from rich.console import Console
from rich.table import Table

from chopsticks.rules import ChopsticksConfig, ConfigError, DEFAULT_CONFIG
from chopsticks.utils.seeding import set_seed
from chopsticks.engine.game import Game, GameOutcome, GameResult
from chopsticks.engine.game_state import GameState
from chopsticks.agents import (
    BaseAgent,
    PromptAgent,
    create_monte_carlo_agent,
    create_random_agent,
)

logger = logging.getLogger(__name__)

# Games longer than this are stopped without a winner
DEFAULT_MAX_TURNS = 200
DEFAULT_SIMS = 50

AGENT_TYPES = ("random", "monte_carlo", "human")


@dataclass
class EvaluationStats:
    """Statistics from evaluation episodes.

    Attributes:
        n_players: Number of seats
        total_episodes: Number of episodes run
        ranks_by_position: Dict mapping player id to list of ranks
        wins_by_position: Dict mapping player id to win count
        cycles: Episodes stopped at a known non-terminating position
        truncations: Episodes stopped at the turn cap
        turns: Number of actions played per episode
    """

    n_players: int = DEFAULT_CONFIG.n_players
    total_episodes: int = 0
    ranks_by_position: dict[int, list[int]] = field(default_factory=lambda: defaultdict(list))
    wins_by_position: dict[int, int] = field(default_factory=lambda: defaultdict(int))
    cycles: int = 0
    truncations: int = 0
    turns: list[int] = field(default_factory=list)

    def record_episode(self, result: GameResult) -> None:
        """Record results from a single episode.

        Args:
            result: Result of the finished game
        """
        self.total_episodes += 1
        for player_id, rank in enumerate(result.ranks):
            self.ranks_by_position[player_id].append(rank)
        if result.outcome == GameOutcome.WIN:
            self.wins_by_position[result.winner_id] += 1
        elif result.outcome == GameOutcome.CYCLE:
            self.cycles += 1
        else:
            self.truncations += 1
        self.turns.append(result.turns)

    def get_win_rate(self, position: int) -> float:
        """Get the fraction of episodes won by a position."""
        return (
            self.wins_by_position[position] / self.total_episodes
            if self.total_episodes > 0
            else 0.0
        )

    def get_average_rank(self, position: int) -> float:
        """Get average rank for a position (lower is better)."""
        ranks = self.ranks_by_position[position]
        return float(np.mean(ranks)) if ranks else 0.0

    def get_rank_distribution(self, position: int) -> dict[int, float]:
        """Get rank distribution for a position."""
        ranks = self.ranks_by_position[position]
        places = range(1, self.n_players + 1)
        if not ranks:
            return {r: 0.0 for r in places}
        total = len(ranks)
        return {r: ranks.count(r) / total for r in places}

    @property
    def average_turns(self) -> float:
        return float(np.mean(self.turns)) if self.turns else 0.0

    def summary_table(self, agent_names: list[str]) -> Table:
        """Build a rich table summarising the episodes.

        Args:
            agent_names: List of agent names by player id

        Returns:
            Table with one row per player id
        """
        table = Table(
            title=f"Evaluation Summary ({self.total_episodes} episodes)",
            box=box.SIMPLE,
            show_header=True,
        )
        table.add_column("Seat", justify="right")
        table.add_column("Agent")
        table.add_column("Wins", justify="right")
        table.add_column("Win Rate", justify="right")
        table.add_column("Avg Rank", justify="right")
        table.add_column("Rank Distribution")

        for pos in range(self.n_players):
            name = agent_names[pos] if pos < len(agent_names) else f"Player {pos}"
            rank_dist = self.get_rank_distribution(pos)
            table.add_row(
                f"P{pos}",
                name,
                str(self.wins_by_position[pos]),
                f"{self.get_win_rate(pos):.1%}",
                f"{self.get_average_rank(pos):.2f}",
                ", ".join(f"{r}={share:.0%}" for r, share in rank_dist.items()),
            )

        table.caption = (
            f"cycles: {self.cycles}  truncated: {self.truncations}  "
            f"average turns: {self.average_turns:.1f}"
        )
        return table


def add_config_arguments(parser: argparse.ArgumentParser) -> None:
    """Add the rule configuration flags to a parser."""
    parser.add_argument(
        "--players", type=int, default=DEFAULT_CONFIG.n_players, help="Number of players (default: 2)"
    )
    parser.add_argument(
        "--hands", type=int, default=DEFAULT_CONFIG.n_hands, help="Hands per player (default: 2)"
    )
    parser.add_argument(
        "--rollover",
        type=int,
        default=DEFAULT_CONFIG.rollover,
        help="Finger count at which a hand wraps around (default: 5)",
    )
    parser.add_argument(
        "--initial-fingers",
        type=int,
        default=DEFAULT_CONFIG.initial_fingers,
        help="Fingers on every hand at the start (default: 1)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING)",
    )


def config_from_args(args: argparse.Namespace) -> ChopsticksConfig:
    """Build the rule configuration from parsed flags.

    Raises:
        ConfigError: If the flags describe an invalid configuration
    """
    return ChopsticksConfig(
        n_players=args.players,
        n_hands=args.hands,
        rollover=args.rollover,
        initial_fingers=args.initial_fingers,
    )


def parse_agent_types(agents: str, n_players: int) -> list[str]:
    """Parse a comma-separated agent list, filling missing seats with the last type.

    Raises:
        ValueError: If an agent type is unknown
    """
    agent_types = [a.strip().lower() for a in agents.split(",") if a.strip()]
    for agent_type in agent_types:
        if agent_type not in AGENT_TYPES:
            raise ValueError(
                f"Unknown agent type '{agent_type}'. Valid types: {', '.join(AGENT_TYPES)}"
            )
    while len(agent_types) < n_players:
        agent_types.append(agent_types[-1] if agent_types else "random")
    return agent_types[:n_players]


def create_agent(
    agent_type: str,
    seed: int | None = None,
    n_sims: int = DEFAULT_SIMS,
    console: Console | None = None,
) -> BaseAgent:
    """Create an agent of the specified type.

    Args:
        agent_type: Type of agent ('random', 'monte_carlo', 'human')
        seed: Random seed for the agent
        n_sims: Rollouts per action for the Monte-Carlo agent
        console: Console for the human agent's prompts

    Returns:
        Agent instance

    Raises:
        ValueError: If agent type is unknown
    """
    agent_type = agent_type.lower().strip()

    if agent_type == "random":
        return create_random_agent(seed=seed)
    elif agent_type == "monte_carlo":
        return create_monte_carlo_agent(n_sims=n_sims, seed=seed)
    elif agent_type == "human":
        return PromptAgent(console=console)
    else:
        raise ValueError(f"Unknown agent type: {agent_type}. Available: {', '.join(AGENT_TYPES)}")


def run_episode(
    agents: list[BaseAgent],
    config: ChopsticksConfig = DEFAULT_CONFIG,
    max_turns: int | None = DEFAULT_MAX_TURNS,
) -> GameResult:
    """Run a single evaluation episode.

    Args:
        agents: One agent per player id
        config: Rule configuration
        max_turns: Turn cap (None = no cap)

    Returns:
        GameResult of the finished game
    """
    for agent in agents:
        agent.reset()
    game = Game(GameState.new_game(config), agents, max_turns=max_turns)
    return game.run()


def evaluate(
    agent_types: list[str],
    episodes: int = 10,
    config: ChopsticksConfig = DEFAULT_CONFIG,
    n_sims: int = DEFAULT_SIMS,
    seed: int | None = None,
    max_turns: int | None = DEFAULT_MAX_TURNS,
    console: Console | None = None,
) -> EvaluationStats:
    """Run evaluation episodes.

    Args:
        agent_types: Agent types by player id. If fewer than n_players,
                  fills remaining with the last specified type.
                  Supported types: random, monte_carlo
        episodes: Number of episodes to run
        config: Rule configuration
        n_sims: Rollouts per action for Monte-Carlo agents
        seed: Random seed for reproducibility
        max_turns: Turn cap per episode (None = no cap)
        console: Console for the summary (default: a new Console)

    Returns:
        EvaluationStats with results

    Raises:
        ValueError: If an agent type is unknown or interactive
    """
    console = console or Console()
    agent_types = parse_agent_types(",".join(agent_types), config.n_players)
    if "human" in agent_types:
        raise ValueError("Interactive agents cannot be evaluated; use scripts.play instead")

    if seed is not None:
        set_seed(seed)
        logger.info("Seeded random and numpy with %d", seed)
    rng = np.random.default_rng(seed)
    agents = []
    for agent_type in agent_types:
        agent_seed = int(rng.integers(0, 2**31)) if seed is not None else None
        agents.append(create_agent(agent_type, seed=agent_seed, n_sims=n_sims))

    agent_names = [f"{agent_types[i]} ({i})" for i in range(config.n_players)]
    stats = EvaluationStats(n_players=config.n_players)

    logger.info(
        "Running %d episodes (%s) with agents: %s", episodes, config, ", ".join(agent_types)
    )

    for ep in range(episodes):
        result = run_episode(agents, config=config, max_turns=max_turns)
        stats.record_episode(result)
        logger.info(
            "Episode %d: %s after %d turns, winner=%s, ranks=%s",
            ep + 1,
            result.outcome.value,
            result.turns,
            result.winner_id,
            result.ranks,
        )

    console.print(stats.summary_table(agent_names))
    return stats


def main():
    """Main entry point for evaluation script."""
    parser = argparse.ArgumentParser(
        description="Evaluate chopsticks agents",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m chopsticks.scripts.evaluate --episodes 100 --agents monte_carlo,random
  python -m chopsticks.scripts.evaluate --episodes 50 --players 3 --agents random --seed 42
  python -m chopsticks.scripts.evaluate --episodes 20 --agents monte_carlo,monte_carlo --sims 20
        """,
    )

    parser.add_argument(
        "--episodes",
        "-n",
        type=int,
        default=10,
        help="Number of evaluation episodes to run (default: 10)",
    )

    parser.add_argument(
        "--agents",
        "-a",
        type=str,
        default="random,random",
        help="Comma-separated list of agent types: random, monte_carlo (default: random,random)",
    )

    parser.add_argument(
        "--sims", type=int, default=DEFAULT_SIMS, help="Rollouts per action for monte_carlo agents"
    )

    parser.add_argument(
        "--max-turns",
        type=int,
        default=DEFAULT_MAX_TURNS,
        help=f"Turn cap per episode (default: {DEFAULT_MAX_TURNS})",
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
        config = config_from_args(args)
        evaluate(
            agent_types=args.agents.split(","),
            episodes=args.episodes,
            config=config,
            n_sims=args.sims,
            seed=args.seed,
            max_turns=args.max_turns,
            console=console,
        )
    except (ConfigError, ValueError) as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)
    except KeyboardInterrupt:
        console.print("\nEvaluation interrupted by user.")
        sys.exit(0)


if __name__ == "__main__":
    main()
