"""Numbering scheme for hands, actions, and states.

This module provides bijections between game values and dense integer
ranges, for exhaustive indexing (transposition tables, retrograde analysis)
and for the fixed Discrete action space of the environment:

- Hands: base-``rollover`` numeral, first hand most significant
  ``serial = sum(hands[k] * rollover ** (n_hands - 1 - k))``
- Actions: attacks occupy ``[0, attack_serial_base)`` as
  ``(offset * n_hands + attacking_hand) * n_hands + defending_hand``;
  splits occupy ``[attack_serial_base, action_serial_base)`` as
  ``attack_serial_base + hands serial``
- States: seat-ordered hand serials folded through ``player_serial_base``
  (eliminated players are all-zero hands), then the mover id appended
  as ``* n_players + mover_id``
- State-action pairs: ``state serial * action_serial_base + action serial``

The roster order of a state is not stored: it is always the remaining ids
in ascending order, rotated to start at the mover.
"""

from typing import TYPE_CHECKING, List, Sequence, Tuple

import numpy as np

from chopsticks.rules import Action, Attack, Split, ChopsticksConfig

if TYPE_CHECKING:
    from chopsticks.engine.game_state import GameState


class ActionEncodingError(Exception):
    """Raised when a value cannot be encoded or a serial cannot be decoded."""

    pass


def encode_hands(hands: Sequence[int], config: ChopsticksConfig) -> int:
    """Encode a hand array as a base-``rollover`` numeral.

    Args:
        hands: One value per hand, each in [0, rollover)
        config: Rule configuration

    Returns:
        Serial in [0, player_serial_base)

    Raises:
        ActionEncodingError: If the hands do not fit the configuration
    """
    if len(hands) != config.n_hands:
        raise ActionEncodingError(f"Expected {config.n_hands} hands, got {len(hands)}")
    serial = 0
    for fingers in hands:
        if not 0 <= fingers < config.rollover:
            raise ActionEncodingError(
                f"Hand value {fingers} out of range [0, {config.rollover})"
            )
        serial = serial * config.rollover + int(fingers)
    return serial


def decode_hands(serial: int, config: ChopsticksConfig) -> Tuple[int, ...]:
    """Decode a hand serial.

    Raises:
        ActionEncodingError: If the serial is out of range
    """
    if not 0 <= serial < config.player_serial_base:
        raise ActionEncodingError(
            f"Hands serial {serial} out of range [0, {config.player_serial_base})"
        )
    hands = []
    for _ in range(config.n_hands):
        serial, fingers = divmod(serial, config.rollover)
        hands.append(fingers)
    return tuple(reversed(hands))


def encode_action(action: Action, config: ChopsticksConfig) -> int:
    """Encode an action.

    Args:
        action: Attack or Split
        config: Rule configuration

    Returns:
        Serial in [0, action_serial_base)

    Raises:
        ActionEncodingError: If the action does not fit the configuration
    """
    n_hands = config.n_hands
    if isinstance(action, Attack):
        if not 0 <= action.target_offset < config.n_players:
            raise ActionEncodingError(f"Target offset {action.target_offset} out of range")
        if not (0 <= action.attacking_hand < n_hands and 0 <= action.defending_hand < n_hands):
            raise ActionEncodingError(f"Hand indexes out of range in {action}")
        serial = action.target_offset
        serial = serial * n_hands + action.attacking_hand
        serial = serial * n_hands + action.defending_hand
        return serial
    if isinstance(action, Split):
        return config.attack_serial_base + encode_hands(action.new_hands, config)
    raise ActionEncodingError(f"Unknown action: {action!r}")


def decode_action(serial: int, config: ChopsticksConfig) -> Action:
    """Decode an action serial.

    Raises:
        ActionEncodingError: If the serial is out of range
    """
    if not 0 <= serial < config.action_serial_base:
        raise ActionEncodingError(
            f"Action serial {serial} out of range [0, {config.action_serial_base})"
        )
    if serial >= config.attack_serial_base:
        return Split(new_hands=decode_hands(serial - config.attack_serial_base, config))
    serial, defending_hand = divmod(serial, config.n_hands)
    target_offset, attacking_hand = divmod(serial, config.n_hands)
    return Attack(
        target_offset=target_offset,
        attacking_hand=attacking_hand,
        defending_hand=defending_hand,
    )


def encode_state(state: "GameState") -> int:
    """Encode a game state.

    Args:
        state: Game state with at least one remaining player

    Returns:
        Serial in [0, state_serial_base)
    """
    config = state.config
    seats: List[Sequence[int]] = [[0] * config.n_hands for _ in range(config.n_players)]
    for player in state.players:
        seats[player.player_id] = player.hands
    serial = 0
    for hands in seats:
        serial = serial * config.player_serial_base + encode_hands(hands, config)
    mover_id = state.players[0].player_id
    return serial * config.n_players + mover_id


def decode_state(serial: int, config: ChopsticksConfig) -> "GameState":
    """Decode a state serial.

    Raises:
        ActionEncodingError: If the serial is out of range or does not name
            a valid state (unsorted hands, eliminated mover)
    """
    from chopsticks.engine.game_state import GameState

    if not 0 <= serial < config.state_serial_base:
        raise ActionEncodingError(
            f"State serial {serial} out of range [0, {config.state_serial_base})"
        )
    serial, mover_id = divmod(serial, config.n_players)
    seats = []
    for _ in range(config.n_players):
        serial, hands_serial = divmod(serial, config.player_serial_base)
        seats.append(decode_hands(hands_serial, config))
    seats.reverse()

    for player_id, hands in enumerate(seats):
        if list(hands) != sorted(hands):
            raise ActionEncodingError(f"Hands of player {player_id} are not sorted: {hands}")
    try:
        return GameState.from_hands(seats, config=config, mover_id=mover_id)
    except ValueError as e:
        raise ActionEncodingError(f"State serial does not name a valid state: {e}") from e


def encode_state_action(state: "GameState", action: Action) -> int:
    """Pack a (state, action) pair into a single serial."""
    config = state.config
    return encode_state(state) * config.action_serial_base + encode_action(action, config)


def decode_state_action(serial: int, config: ChopsticksConfig) -> Tuple["GameState", Action]:
    """Unpack a (state, action) serial.

    Raises:
        ActionEncodingError: If the serial is out of range
    """
    if not 0 <= serial < config.state_action_serial_base:
        raise ActionEncodingError(
            f"State-action serial {serial} out of range [0, {config.state_action_serial_base})"
        )
    state_serial, action_serial = divmod(serial, config.action_serial_base)
    return decode_state(state_serial, config), decode_action(action_serial, config)


def get_action_mask(state: "GameState") -> np.ndarray:
    """Get the legal action mask for the current state.

    Args:
        state: Current game state

    Returns:
        Boolean numpy array of shape (action_serial_base,), True at the
        serial of every legal action
    """
    config = state.config
    action_mask = np.zeros(config.action_serial_base, dtype=bool)
    if len(state.players) <= 1:
        return action_mask
    for action in state.iter_actions():
        action_mask[encode_action(action, config)] = True
    return action_mask


def count_legal_actions(action_mask: np.ndarray) -> int:
    """Count the number of legal (unmasked) actions."""
    return int(np.sum(action_mask))
