"""Chopsticks agents.

This module provides:
- BaseAgent: Protocol every agent implements (get_action, reset)
- RandomAgent: Baseline agent that plays random legal actions
- MonteCarloAgent: Agent that scores actions by random rollouts
- PromptAgent: Interactive agent reading actions from the console
"""

from .random_agent import (
    BaseAgent,
    RandomAgent,
    create_random_agent,
    require_turn,
)

from .monte_carlo_agent import (
    DEFAULT_MAX_ROLLOUT_TURNS,
    MonteCarloAgent,
    create_monte_carlo_agent,
)

from .prompt_agent import PromptAgent

__all__ = [
    # Protocols
    "BaseAgent",
    "require_turn",
    # Random agent
    "RandomAgent",
    "create_random_agent",
    # Monte-Carlo agent
    "DEFAULT_MAX_ROLLOUT_TURNS",
    "MonteCarloAgent",
    "create_monte_carlo_agent",
    # Interactive agent
    "PromptAgent",
]
