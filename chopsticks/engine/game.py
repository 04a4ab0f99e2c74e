"""Game driver: turn loop, history, and rankings.

This module provides:
- Game: asks the mover's agent for an action, applies it, and tracks ranks
- GameOutcome / GameResult: how a game ended
- play_random_game: play a complete game with random actions

Ranking:
- Every player id starts at the sentinel rank ``n_players`` (undetermined,
  the worst place)
- A player leaving the roster gets the roster size just before its removal,
  which is its finishing place
- The last player standing gets rank 1
- Smaller ranks are better placements

A game stops without a winner when it reaches a known non-terminating
position (see rules.config.known_cycles) or when ``max_turns`` actions were
played; undetermined ranks keep the sentinel.
"""

from dataclasses import dataclass, field
from enum import Enum
import logging
from typing import TYPE_CHECKING, FrozenSet, List, Optional, Sequence, Tuple, Union

from chopsticks.rules import Action, known_cycles
from chopsticks.engine.game_state import GameState, Over, Turn

if TYPE_CHECKING:
    from chopsticks.agents.random_agent import BaseAgent

logger = logging.getLogger(__name__)


class GameOutcome(Enum):
    """How a game ended."""

    WIN = "win"  # One player remains
    CYCLE = "cycle"  # Reached a known non-terminating position
    TRUNCATED = "truncated"  # Hit the turn cap


@dataclass
class GameResult:
    """Result of a finished game.

    Attributes:
        outcome: How the game ended
        winner_id: Id of the winner (None unless outcome is WIN)
        ranks: Rank per player id (1 = best, n_players = worst/undetermined)
        turns: Number of actions played
        history: (player_id, action) pairs in play order
    """

    outcome: GameOutcome
    winner_id: Optional[int]
    ranks: List[int]
    turns: int
    history: List[Tuple[int, Action]] = field(default_factory=list)


class Game:
    """Drives a game between agents.

    Attributes:
        state: Current game state (owned and mutated by the game)
        agents: One agent per player id
        history: (player_id, action) pairs in play order
        ranks: Rank per player id
        known_cycles: Abbreviations at which the game stops without a winner
        max_turns: Optional cap on the number of actions played
    """

    def __init__(
        self,
        state: GameState,
        agents: Union["BaseAgent", Sequence["BaseAgent"]],
        known_cycles: Optional[FrozenSet[str]] = None,
        max_turns: Optional[int] = None,
    ):
        """Initialize the game.

        Args:
            state: Starting state
            agents: One agent per player id, or a single agent for every seat
            known_cycles: Non-terminating abbreviations (default: for the
                state's configuration)
            max_turns: Optional cap on the number of actions played
        """
        n_players = state.config.n_players
        if isinstance(agents, Sequence):
            if len(agents) != n_players:
                raise ValueError(f"Expected {n_players} agents, got {len(agents)}")
            self.agents = list(agents)
        else:
            self.agents = [agents] * n_players

        self.state = state
        self.known_cycles = (
            _default_cycles(state) if known_cycles is None else frozenset(known_cycles)
        )
        self.max_turns = max_turns
        self.history: List[Tuple[int, Action]] = []
        self.ranks = [n_players] * n_players
        self._assign_winner_rank()

    @property
    def turns(self) -> int:
        return len(self.history)

    def get_action(self) -> Optional[Action]:
        """Ask the mover's agent for an action (None if the game is over)."""
        status = self.state.status()
        if isinstance(status, Turn):
            return self.agents[status.active_id].get_action(self.state)
        return None

    def play_action(self, action: Action) -> None:
        """Apply an action for the mover and update the rankings.

        Raises:
            ActionError: If the engine rejects the action
        """
        ids_before = self.state.player_ids()
        mover_id = ids_before[0]
        self.state.play_action(action)
        self.history.append((mover_id, action))

        remaining = set(self.state.player_ids())
        for player_id in ids_before:
            if player_id not in remaining:
                self.ranks[player_id] = len(ids_before)
        self._assign_winner_rank()

    def play_next_action(self) -> Action:
        """Fetch and apply the mover's next action.

        Raises:
            RuntimeError: If the game is over
        """
        action = self.get_action()
        if action is None:
            raise RuntimeError("The game is over")
        self.play_action(action)
        return action

    def is_cycle(self) -> bool:
        """Whether the current position is a known non-terminating one."""
        return self.state.abbreviation() in self.known_cycles

    def run(self) -> GameResult:
        """Play until the game is over, cycles, or hits the turn cap."""
        outcome = GameOutcome.WIN
        while isinstance(self.state.status(), Turn):
            if self.is_cycle():
                outcome = GameOutcome.CYCLE
                break
            if self.max_turns is not None and self.turns >= self.max_turns:
                outcome = GameOutcome.TRUNCATED
                break
            action = self.play_next_action()
            logger.debug(
                "Turn %d: player %d plays %s -> %s",
                self.turns,
                self.history[-1][0],
                action,
                self.state.abbreviation(),
            )

        status = self.state.status()
        winner_id = status.winner_id if isinstance(status, Over) else None
        logger.debug(
            "Game ended (%s) after %d turns, winner=%s", outcome.value, self.turns, winner_id
        )
        return GameResult(
            outcome=outcome,
            winner_id=winner_id,
            ranks=list(self.ranks),
            turns=self.turns,
            history=list(self.history),
        )

    def get_rankings(self) -> List[int]:
        """Play the game out and return the rank per player id."""
        return self.run().ranks

    def _assign_winner_rank(self) -> None:
        status = self.state.status()
        if isinstance(status, Over):
            self.ranks[status.winner_id] = 1


def _default_cycles(state: GameState) -> FrozenSet[str]:
    return known_cycles(state.config)


def play_random_game(
    state: Optional[GameState] = None,
    seed: Optional[int] = None,
    max_turns: Optional[int] = None,
) -> GameResult:
    """Play a complete game with random actions.

    Args:
        state: Starting state (default: a new default game)
        seed: Random seed for reproducibility
        max_turns: Optional cap on the number of actions played

    Returns:
        GameResult of the finished game
    """
    from chopsticks.agents.random_agent import RandomAgent

    state = state if state is not None else GameState.new_game()
    game = Game(state, RandomAgent(seed=seed), max_turns=max_turns)
    return game.run()
