"""Rule configuration for a game of chopsticks.

This module provides:
- ChopsticksConfig: player count, hand count, rollover and starting fingers
- Derived serial bases used by the numbering scheme
- known_cycles: abbreviations known to repeat forever for a configuration

A hand is dead when it holds 0 fingers. Attacking adds the attacker's
fingers to the defending hand modulo ``rollover``.
"""

from dataclasses import dataclass, replace
from typing import FrozenSet

import numpy as np


# Widest serial the numbering scheme may produce. Serials are stored in
# numpy int64 arrays by the environment and evaluation code.
MAX_SERIAL = int(np.iinfo(np.int64).max)


class ConfigError(ValueError):
    """Raised when a rule configuration is invalid."""

    pass


@dataclass(frozen=True)
class ChopsticksConfig:
    """Rule configuration bound to every game state.

    Attributes:
        n_players: Number of players at the start of a game (>= 2)
        n_hands: Number of hands per player (>= 1)
        rollover: Modulus at which a hand wraps back to 0 (dead)
        initial_fingers: Fingers on every hand at the start of a game
    """

    n_players: int = 2
    n_hands: int = 2
    rollover: int = 5
    initial_fingers: int = 1

    def __post_init__(self):
        if self.n_players < 2:
            raise ConfigError(f"n_players must be at least 2, got {self.n_players}")
        if self.n_hands < 1:
            raise ConfigError(f"n_hands must be at least 1, got {self.n_hands}")
        if not 0 < self.initial_fingers < self.rollover:
            raise ConfigError(
                f"initial_fingers must lie in (0, rollover): "
                f"initial_fingers={self.initial_fingers}, rollover={self.rollover}"
            )
        if self.state_action_serial_base - 1 > MAX_SERIAL:
            raise ConfigError(
                f"Serials for {self} overflow int64 "
                f"({self.state_action_serial_base} > {MAX_SERIAL})"
            )

    @property
    def player_serial_base(self) -> int:
        """Number of distinct hand arrays (``rollover ** n_hands``)."""
        return self.rollover**self.n_hands

    @property
    def attack_serial_base(self) -> int:
        """Serials below this value are attacks.

        ``n_players`` is one higher than necessary since offset 0 (the mover)
        is never a valid target.
        """
        return self.n_players * self.n_hands * self.n_hands

    @property
    def action_serial_base(self) -> int:
        """Size of the action serial domain (attacks then splits)."""
        return self.attack_serial_base + self.player_serial_base

    @property
    def state_serial_base(self) -> int:
        """Size of the state serial domain (seat hands, then mover id)."""
        return self.player_serial_base**self.n_players * self.n_players

    @property
    def state_action_serial_base(self) -> int:
        """Size of the packed (state, action) serial domain."""
        return self.state_serial_base * self.action_serial_base

    def with_n_players(self, n_players: int) -> "ChopsticksConfig":
        return replace(self, n_players=n_players)

    def with_n_hands(self, n_hands: int) -> "ChopsticksConfig":
        return replace(self, n_hands=n_hands)

    def with_rollover(self, rollover: int) -> "ChopsticksConfig":
        return replace(self, rollover=rollover)

    def with_initial_fingers(self, initial_fingers: int) -> "ChopsticksConfig":
        return replace(self, initial_fingers=initial_fingers)

    def __str__(self) -> str:
        return (
            f"ChopsticksConfig(players={self.n_players}, hands={self.n_hands}, "
            f"rollover={self.rollover}, initial={self.initial_fingers})"
        )


DEFAULT_CONFIG = ChopsticksConfig()


# Abbreviations that repeat forever under the given rules, keyed by
# (n_players, n_hands, rollover, initial_fingers).
_KNOWN_CYCLES = {
    # Mover [0, 1] against [0, 2]: the lone hands keep feeding each other
    # 0102 -> 0301 -> 0403 -> 0204 -> 0102.
    (2, 2, 5, 1): frozenset({"0102"}),
}


def known_cycles(config: ChopsticksConfig) -> FrozenSet[str]:
    """Get the abbreviations known to never terminate for a configuration.

    Args:
        config: Rule configuration

    Returns:
        Frozenset of abbreviations (empty when none are known)
    """
    key = (config.n_players, config.n_hands, config.rollover, config.initial_fingers)
    return _KNOWN_CYCLES.get(key, frozenset())
