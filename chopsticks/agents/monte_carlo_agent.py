"""Pure Monte-Carlo rollout agent.

For every legal action the agent plays ``n_sims`` random games starting
from the position after that action and records the rank the mover ends
with (see engine.game for the ranking). The action with the smallest sum
of ranks is chosen; ties go to the action enumerated first.

Rollouts play the mover's own future turns at random as well, so the agent
undervalues lines that need accurate play from itself. This tends not to
work very well against strong opponents.
"""

import logging
from typing import List, Optional, Tuple

import numpy as np

from chopsticks.rules import Action
from chopsticks.engine.game import Game
from chopsticks.engine.game_state import GameState
from chopsticks.agents.random_agent import RandomAgent, require_turn

logger = logging.getLogger(__name__)

# Rollouts longer than this are scored as undetermined (worst rank)
DEFAULT_MAX_ROLLOUT_TURNS = 200


class MonteCarloAgent:
    """Agent that scores every legal action by random rollouts.

    Attributes:
        n_sims: Number of rollouts per legal action
        max_rollout_turns: Turn cap of a single rollout
        name: Agent name for identification
        rng: Random number generator shared with the rollout policy
    """

    def __init__(
        self,
        n_sims: int,
        seed: Optional[int] = None,
        max_rollout_turns: Optional[int] = DEFAULT_MAX_ROLLOUT_TURNS,
        name: str = "MonteCarloAgent",
    ):
        """Initialize the Monte-Carlo agent.

        Args:
            n_sims: Number of rollouts per legal action (> 0)
            seed: Random seed for reproducibility
            max_rollout_turns: Turn cap of a single rollout (None = no cap)
            name: Agent name for identification

        Raises:
            ValueError: If n_sims is not positive
        """
        if n_sims <= 0:
            raise ValueError(f"n_sims must be positive, got {n_sims}")
        self.n_sims = n_sims
        self.max_rollout_turns = max_rollout_turns
        self.name = name
        self._seed = seed
        self.rng = np.random.default_rng(seed)
        self._rollout_policy = RandomAgent(rng=self.rng, name=f"{name}-rollout")

    def get_action(self, state: GameState) -> Action:
        """Select the action with the smallest total rollout rank.

        Raises:
            RuntimeError: If the game is over
            ValueError: If no legal actions available
        """
        scores = self.score_actions(state)
        if not scores:
            raise ValueError("No legal actions available")
        # min() keeps the first of equal scores
        best_action, best_score = min(scores, key=lambda item: item[1])
        logger.debug(
            "%s picked %s (score %d over %d actions)", self.name, best_action, best_score, len(scores)
        )
        return best_action

    def score_actions(self, state: GameState) -> List[Tuple[Action, int]]:
        """Score every legal action in enumeration order.

        Returns:
            (action, sum of rollout ranks) pairs; lower is better
        """
        player_id = require_turn(state)
        return [
            (action, self.score_action(state, action, player_id))
            for action in state.iter_actions()
        ]

    def score_action(self, state: GameState, action: Action, player_id: int) -> int:
        """Sum of ``player_id``'s ranks over ``n_sims`` rollouts after ``action``."""
        return sum(self.rollout(state, action, player_id) for _ in range(self.n_sims))

    def rollout(self, state: GameState, action: Action, player_id: int) -> int:
        """Play ``action`` on a copy of ``state`` and finish the game at random.

        Returns:
            Rank of ``player_id`` at the end of the rollout
        """
        sim_state = state.copy()
        sim_state.play_action(action)
        sim_game = Game(sim_state, self._rollout_policy, max_turns=self.max_rollout_turns)
        return sim_game.get_rankings()[player_id]

    def reset(self) -> None:
        """Reset agent state (no-op for Monte-Carlo agent)."""
        pass

    def __repr__(self) -> str:
        return f"MonteCarloAgent(n_sims={self.n_sims}, seed={self._seed}, name={self.name!r})"


def create_monte_carlo_agent(n_sims: int = 50, seed: Optional[int] = None) -> MonteCarloAgent:
    """Factory function to create a Monte-Carlo agent."""
    return MonteCarloAgent(n_sims=n_sims, seed=seed)
