"""Legal action enumeration.

This module provides:
- Attack enumeration: every live hand of the mover against every live hand
  of every other player
- Split enumeration: redistributions of the mover's fingers over its hands,
  each hand in [1, rollover), excluding the current hands
- Combined enumeration in a fixed order (attacks, then splits)

The order of iter_actions() is the tie-break used by the agents: the
earliest action reaching the best score wins.

Every enumerated action is accepted by GameState.play_action(). A position
that is not over always has at least one attack, since the mover and every
other remaining player hold a live hand.
"""

from itertools import product
from typing import TYPE_CHECKING, Iterator, List, Tuple

from chopsticks.rules import Action, Attack, Split

if TYPE_CHECKING:
    from chopsticks.engine.game_state import GameState


def iter_attack_actions(state: "GameState") -> Iterator[Action]:
    """All attack actions for the mover.

    Args:
        state: Current game state

    Yields:
        Attack actions ordered by target offset, attacking hand, defending hand
    """
    players = state.players
    if not players:
        return
    attacker = players[0]
    for offset in range(1, len(players)):
        defender = players[offset]
        for a, b in product(attacker.alive_hand_indexes(), defender.alive_hand_indexes()):
            yield Attack(target_offset=offset, attacking_hand=a, defending_hand=b)


def iter_split_actions(state: "GameState") -> Iterator[Action]:
    """All split actions for the mover.

    See split_candidates() for the distributions offered.

    Args:
        state: Current game state

    Yields:
        Split actions with ascending new hands, in lexicographic order
    """
    players = state.players
    if not players:
        return
    config = state.config
    hands = tuple(players[0].hands)
    total = sum(hands)
    for new_hands in split_candidates(total, config.n_hands, config.rollover):
        if new_hands != hands:
            yield Split(new_hands=new_hands)


def iter_actions(state: "GameState") -> Iterator[Action]:
    """All legal actions: attacks first, then splits."""
    yield from iter_attack_actions(state)
    yield from iter_split_actions(state)


def get_legal_actions(state: "GameState") -> List[Action]:
    """Get all legal actions as a list."""
    return list(iter_actions(state))


def split_candidates(total: int, n_hands: int, rollover: int) -> Iterator[Tuple[int, ...]]:
    """Distributions a split may move ``total`` fingers to.

    For two hands this is ``(a, total - a)`` for every ``a`` from
    ``max(1, total % rollover + 1)`` to ``total // 2``. A total below the
    rollover has no candidates, so a player down to one live hand with
    fewer than ``rollover`` fingers cannot split. With more hands every
    partition from partition_fingers() is a candidate.

    Args:
        total: Number of fingers to distribute
        n_hands: Number of hands
        rollover: Exclusive upper bound of a hand value

    Yields:
        Non-decreasing tuples in lexicographic order
    """
    if n_hands != 2:
        yield from partition_fingers(total, n_hands, rollover)
        return
    for a in range(max(1, total % rollover + 1), total // 2 + 1):
        yield (a, total - a)


def partition_fingers(total: int, n_hands: int, rollover: int) -> Iterator[Tuple[int, ...]]:
    """Ascending tuples of ``n_hands`` values in [1, rollover) summing to ``total``.

    Args:
        total: Number of fingers to distribute
        n_hands: Number of hands
        rollover: Exclusive upper bound of a hand value

    Yields:
        Non-decreasing tuples in lexicographic order
    """
    yield from _partitions(total, n_hands, 1, rollover - 1)


def _partitions(total: int, parts: int, low: int, high: int) -> Iterator[Tuple[int, ...]]:
    if parts == 1:
        if low <= total <= high:
            yield (total,)
        return
    # The smallest part bounds every later part from below
    start = max(low, total - high * (parts - 1))
    stop = min(high, total // parts)
    for first in range(start, stop + 1):
        for rest in _partitions(total - first, parts - 1, first, high):
            yield (first,) + rest
