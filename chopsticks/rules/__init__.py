"""Chopsticks rules definitions.

This module provides:
- Rule configuration and known cycles (config.py)
- Attack and Split actions (actions.py)
- The action error taxonomy (errors.py)
"""

from .config import (
    ChopsticksConfig,
    ConfigError,
    DEFAULT_CONFIG,
    MAX_SERIAL,
    known_cycles,
)

from .actions import (
    Action,
    Attack,
    Split,
    describe_action,
)

from .errors import (
    ChopsticksError,
    ActionError,
    GameIsOver,
    WrongTurn,
    AttackError,
    PlayerIndexOutOfBounds,
    PlayerAttackSelf,
    HandIndexOutOfBounds,
    HandIsNotAlive,
    SplitError,
    InvalidHandLen,
    MoveWithoutChange,
    InvalidTotalFingers,
    InvalidTotalRollover,
    InvalidFingerValue,
)

__all__ = [
    # Config
    "ChopsticksConfig",
    "ConfigError",
    "DEFAULT_CONFIG",
    "MAX_SERIAL",
    "known_cycles",
    # Actions
    "Action",
    "Attack",
    "Split",
    "describe_action",
    # Errors
    "ChopsticksError",
    "ActionError",
    "GameIsOver",
    "WrongTurn",
    "AttackError",
    "PlayerIndexOutOfBounds",
    "PlayerAttackSelf",
    "HandIndexOutOfBounds",
    "HandIsNotAlive",
    "SplitError",
    "InvalidHandLen",
    "MoveWithoutChange",
    "InvalidTotalFingers",
    "InvalidTotalRollover",
    "InvalidFingerValue",
]
