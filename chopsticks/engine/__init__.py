"""Chopsticks game engine.

This module provides:
- GameState: roster, rule engine and status
- Player: individual player state
- Turn / Over: game status
- Game: driver with rankings and cycle detection
- play_random_game: Play a complete game with random actions
"""

from .game_state import (
    GameState,
    Position,
    Player,
    Status,
    Turn,
    Over,
)

from .game import (
    Game,
    GameOutcome,
    GameResult,
    play_random_game,
)

__all__ = [
    "GameState",
    "Position",
    "Player",
    "Status",
    "Turn",
    "Over",
    "Game",
    "GameOutcome",
    "GameResult",
    "play_random_game",
]
