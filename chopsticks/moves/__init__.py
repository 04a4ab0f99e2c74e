"""Chopsticks legal actions and numbering scheme.

This module provides:
- Legal action enumeration (legal_moves.py)
- Bijective integer encoding of hands, actions and states (action_encoding.py)
"""

from .legal_moves import (
    iter_attack_actions,
    iter_split_actions,
    iter_actions,
    get_legal_actions,
    partition_fingers,
    split_candidates,
)

from .action_encoding import (
    ActionEncodingError,
    encode_hands,
    decode_hands,
    encode_action,
    decode_action,
    encode_state,
    decode_state,
    encode_state_action,
    decode_state_action,
    get_action_mask,
    count_legal_actions,
)

__all__ = [
    # Legal moves
    "iter_attack_actions",
    "iter_split_actions",
    "iter_actions",
    "get_legal_actions",
    "partition_fingers",
    "split_candidates",
    # Numbering scheme
    "ActionEncodingError",
    "encode_hands",
    "decode_hands",
    "encode_action",
    "decode_action",
    "encode_state",
    "decode_state",
    "encode_state_action",
    "decode_state_action",
    "get_action_mask",
    "count_legal_actions",
]
