"""PettingZoo environments for chopsticks."""

from .chopsticks_aec import (
    ChopsticksAECEnv,
    DEFAULT_MAX_TURNS,
    encode_hands_observation,
    env,
)

__all__ = [
    "ChopsticksAECEnv",
    "DEFAULT_MAX_TURNS",
    "encode_hands_observation",
    "env",
]
