"""Errors raised by the rule engine.

Every rejected action raises a subclass of ActionError. These are
recoverable: an interactive caller asks again, a programmatic caller drops
the candidate. Invariant violations inside the engine are RuntimeError and
are not part of this hierarchy.

- ActionError
  - GameIsOver, WrongTurn
  - AttackError: PlayerIndexOutOfBounds (PlayerAttackSelf),
    HandIndexOutOfBounds, HandIsNotAlive
  - SplitError: InvalidHandLen, MoveWithoutChange, InvalidTotalFingers,
    InvalidFingerValue

There is no separate improper-context error: an action played outside its
context is either after game over (GameIsOver) or out of turn (WrongTurn).
"""


class ChopsticksError(Exception):
    """Base class for game errors."""

    pass


class ActionError(ChopsticksError):
    """Raised when an action cannot be played."""

    pass


class GameIsOver(ActionError):
    """The game has a winner; no further actions are accepted."""

    pass


class WrongTurn(ActionError):
    """A player tried to act while another player is the mover."""

    pass


class AttackError(ActionError):
    """An attack was rejected."""

    pass


class PlayerIndexOutOfBounds(AttackError):
    """The target offset does not name another player in the roster."""

    pass


class PlayerAttackSelf(PlayerIndexOutOfBounds):
    """Offset 0 names the mover itself."""

    pass


class HandIndexOutOfBounds(AttackError):
    """The attacking or defending hand index does not exist."""

    pass


class HandIsNotAlive(AttackError):
    """The attacking or defending hand is dead."""

    pass


class SplitError(ActionError):
    """A split was rejected."""

    pass


class InvalidHandLen(SplitError):
    """The new hands do not have one value per hand."""

    pass


class MoveWithoutChange(SplitError):
    """The new hands equal the current hands."""

    pass


class InvalidTotalFingers(SplitError):
    """The new hands do not hold the same total number of fingers."""

    pass


InvalidTotalRollover = InvalidTotalFingers


class InvalidFingerValue(SplitError):
    """A new hand is dead or reaches the rollover."""

    pass
