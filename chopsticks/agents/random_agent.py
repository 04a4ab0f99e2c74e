"""Random legal action agent.

This module provides a simple baseline agent that randomly selects
from the legal actions. It is also the rollout policy of the
Monte-Carlo agent.
"""

from typing import Optional, Protocol

import numpy as np

from chopsticks.rules import Action
from chopsticks.engine.game_state import GameState, Turn


class BaseAgent(Protocol):
    """Protocol defining the agent interface.

    All agents should implement this interface for compatibility
    with the game driver.
    """

    def get_action(self, state: GameState) -> Action:
        """Select an action for the mover.

        Args:
            state: Current game state; its status must be Turn

        Returns:
            One of ``state.iter_actions()``
        """
        ...

    def reset(self) -> None:
        """Reset agent state (if any) at the start of a new game."""
        ...


def require_turn(state: GameState) -> int:
    """Get the mover's id, failing if the game is over.

    Raises:
        RuntimeError: If the game is over
    """
    status = state.status()
    if not isinstance(status, Turn):
        raise RuntimeError(f"Game is over (winner: {status.player_id})")
    return status.active_id


class RandomAgent:
    """Agent that selects uniformly at random from legal actions.

    Attributes:
        name: Agent name for identification
        rng: Random number generator
    """

    def __init__(
        self,
        seed: Optional[int] = None,
        name: str = "RandomAgent",
        rng: Optional[np.random.Generator] = None,
    ):
        """Initialize the random agent.

        Args:
            seed: Random seed for reproducibility
            name: Agent name for identification
            rng: Generator to share with another agent (overrides seed)
        """
        self.name = name
        self._seed = seed
        self.rng = rng if rng is not None else np.random.default_rng(seed)

    def get_action(self, state: GameState) -> Action:
        """Select a random legal action.

        Raises:
            RuntimeError: If the game is over
            ValueError: If no legal actions available
        """
        require_turn(state)
        actions = list(state.iter_actions())
        if not actions:
            raise ValueError("No legal actions available")
        return actions[int(self.rng.integers(len(actions)))]

    def reset(self) -> None:
        """Reset agent state (no-op for random agent)."""
        pass

    def set_seed(self, seed: int) -> None:
        """Set a new random seed."""
        self._seed = seed
        self.rng = np.random.default_rng(seed)

    def __repr__(self) -> str:
        return f"RandomAgent(seed={self._seed}, name={self.name!r})"


def create_random_agent(seed: Optional[int] = None) -> RandomAgent:
    """Factory function to create a random agent."""
    return RandomAgent(seed=seed)
