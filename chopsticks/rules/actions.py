"""Action definitions.

An action is either an Attack on another player's hand or a Split that
redistributes the mover's fingers. Attack targets are relative to the
mover's rotation position: offset 1 is the next player to move.
"""

from dataclasses import dataclass
from typing import Tuple, Union


@dataclass(frozen=True)
class Attack:
    """The mover uses one of its hands to hit another player's hand.

    Attributes:
        target_offset: Roster offset of the defender (>= 1, 1 = next player)
        attacking_hand: Index of the mover's hand
        defending_hand: Index of the defender's hand
    """

    target_offset: int
    attacking_hand: int
    defending_hand: int

    def __str__(self) -> str:
        return f"attack({self.target_offset}, {self.attacking_hand}, {self.defending_hand})"


@dataclass(frozen=True)
class Split:
    """The mover replaces its hands with ``new_hands``.

    Attributes:
        new_hands: Complete replacement hands, one value per hand
    """

    new_hands: Tuple[int, ...]

    def __post_init__(self):
        # Accept any sequence; stored as a tuple so the action stays hashable
        object.__setattr__(self, "new_hands", tuple(int(h) for h in self.new_hands))

    def __str__(self) -> str:
        return f"split({', '.join(str(h) for h in self.new_hands)})"


Action = Union[Attack, Split]


def describe_action(action: Action, player_id: int) -> str:
    """Describe an action for a transcript.

    Args:
        action: The action played
        player_id: Id of the player who played it

    Returns:
        One-line human readable description
    """
    if isinstance(action, Attack):
        return (
            f"Player {player_id} uses hand {action.attacking_hand} to attack "
            f"hand {action.defending_hand} of the player {action.target_offset} "
            f"turn(s) ahead"
        )
    hands = " and ".join(str(h) for h in action.new_hands)
    return f"Player {player_id} splits into {hands}"
