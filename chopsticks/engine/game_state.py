"""Game state, turn flow, and elimination.

This module provides:
- Player: an immutable id and a sorted list of hand values
- Turn / Over: the game status
- GameState: the roster of remaining players and the rule engine

Game flow:
1. Every player starts with ``initial_fingers`` on every hand
2. The player at the front of the roster is the mover
3. The mover attacks another player's live hand with a live hand, or
   splits its fingers over its own hands
4. An attacked hand becomes ``(defender + attacker) % rollover``
5. A player whose hands are all dead is removed from the roster at once
6. After every action the roster rotates so the next player moves
7. The game is over when one player remains
"""

from collections import deque
from dataclasses import dataclass, field
import logging
from typing import Deque, Iterator, List, Optional, Sequence, Union

from chopsticks.rules import (
    Action,
    Attack,
    Split,
    ChopsticksConfig,
    DEFAULT_CONFIG,
    GameIsOver,
    WrongTurn,
    PlayerAttackSelf,
    PlayerIndexOutOfBounds,
    HandIndexOutOfBounds,
    HandIsNotAlive,
    InvalidHandLen,
    MoveWithoutChange,
    InvalidTotalFingers,
    InvalidFingerValue,
)
from chopsticks.moves.legal_moves import (
    iter_attack_actions,
    iter_split_actions,
    iter_actions,
)

logger = logging.getLogger(__name__)


@dataclass
class Player:
    """State of a single player.

    Attributes:
        player_id: Player identifier, stable while the roster rotates
        hands: Hand values sorted in ascending order (0 = dead)
    """

    player_id: int
    hands: List[int] = field(default_factory=list)

    @property
    def is_eliminated(self) -> bool:
        """A player is eliminated when all of its hands are dead."""
        if not self.hands:
            raise RuntimeError(f"Player {self.player_id} has no hands")
        return self.hands[-1] == 0

    @property
    def total_fingers(self) -> int:
        return sum(self.hands)

    def alive_hand_indexes(self) -> range:
        """Indexes of live hands (the non-zero suffix of the sorted hands)."""
        dead = 0
        for fingers in self.hands:
            if fingers != 0:
                break
            dead += 1
        return range(dead, len(self.hands))

    def copy(self) -> "Player":
        return Player(player_id=self.player_id, hands=list(self.hands))


@dataclass(frozen=True)
class Turn:
    """The game is ongoing and ``active_id`` is the mover."""

    active_id: int

    @property
    def player_id(self) -> int:
        return self.active_id


@dataclass(frozen=True)
class Over:
    """The game is over and ``winner_id`` is the last player standing."""

    winner_id: int

    @property
    def player_id(self) -> int:
        return self.winner_id


Status = Union[Turn, Over]


@dataclass
class GameState:
    """Complete game state.

    Attributes:
        players: Remaining players in rotation order; the front one moves
        config: Rule configuration bound to this state
    """

    players: Deque[Player] = field(default_factory=deque)
    config: ChopsticksConfig = DEFAULT_CONFIG

    def __post_init__(self):
        """Initialize players if not already set."""
        if not isinstance(self.players, deque):
            self.players = deque(self.players)
        if not self.players:
            self.players = deque(
                Player(player_id=i, hands=[self.config.initial_fingers] * self.config.n_hands)
                for i in range(self.config.n_players)
            )

    @classmethod
    def new_game(cls, config: Optional[ChopsticksConfig] = None) -> "GameState":
        """Create a new game with every hand at ``initial_fingers``.

        Args:
            config: Rule configuration (default: DEFAULT_CONFIG)

        Returns:
            New GameState with player 0 to move
        """
        return cls(config=config or DEFAULT_CONFIG)

    @classmethod
    def from_hands(
        cls,
        hands: Sequence[Sequence[int]],
        config: Optional[ChopsticksConfig] = None,
        mover_id: int = 0,
    ) -> "GameState":
        """Create a game state from seat-indexed hands (for testing and decoding).

        Players whose hands are all 0 are treated as already eliminated.
        The roster starts at ``mover_id`` and follows ascending ids,
        wrapping around.

        Args:
            hands: One hand list per player id
            config: Rule configuration (default: DEFAULT_CONFIG)
            mover_id: Id of the player to move

        Returns:
            New GameState with the given hands

        Raises:
            ValueError: If the hands do not fit the configuration
        """
        config = config or DEFAULT_CONFIG
        if len(hands) != config.n_players:
            raise ValueError(f"Expected {config.n_players} players, got {len(hands)}")

        players = []
        for player_id, player_hands in enumerate(hands):
            if len(player_hands) != config.n_hands:
                raise ValueError(
                    f"Expected {config.n_hands} hands for player {player_id}, "
                    f"got {len(player_hands)}"
                )
            if any(not 0 <= h < config.rollover for h in player_hands):
                raise ValueError(f"Hand values out of range for player {player_id}: {player_hands}")
            player = Player(player_id=player_id, hands=sorted(int(h) for h in player_hands))
            if not player.is_eliminated:
                players.append(player)

        if not any(p.player_id == mover_id for p in players):
            raise ValueError(f"Mover {mover_id} is not a remaining player")

        roster = deque(players)
        while roster[0].player_id != mover_id:
            roster.rotate(-1)
        return cls(players=roster, config=config)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def status(self) -> Status:
        """Current game status.

        Raises:
            RuntimeError: If no players remain (invalid state)
        """
        if not self.players:
            raise RuntimeError("No non-eliminated players remain")
        player_id = self.players[0].player_id
        if len(self.players) == 1:
            return Over(winner_id=player_id)
        return Turn(active_id=player_id)

    def is_game_over(self) -> bool:
        return isinstance(self.status(), Over)

    def get_current_player(self) -> Player:
        """Get the mover."""
        return self.players[0]

    def get_player(self, player_id: int) -> Optional[Player]:
        """Get a remaining player by id (None if eliminated)."""
        for player in self.players:
            if player.player_id == player_id:
                return player
        return None

    def player_ids(self) -> List[int]:
        """Ids of the remaining players in rotation order."""
        return [player.player_id for player in self.players]

    def abbreviation(self) -> str:
        """The 'abbreviation' representation of the game state.

        Every player's hand values in roster order, e.g. ``"1111"`` at the
        start of a default game.
        """
        return "".join(str(h) for player in self.players for h in player.hands)

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def iter_attack_actions(self) -> Iterator[Action]:
        return iter_attack_actions(self)

    def iter_split_actions(self) -> Iterator[Action]:
        return iter_split_actions(self)

    def iter_actions(self) -> Iterator[Action]:
        """All legal actions: attacks first, then splits."""
        return iter_actions(self)

    def get_legal_actions(self) -> List[Action]:
        return list(self.iter_actions())

    def play_action(self, action: Action, player_id: Optional[int] = None) -> None:
        """Apply an action for the mover.

        Args:
            action: Attack or Split
            player_id: Player claiming the turn (default: the mover)

        Raises:
            GameIsOver: If one player or fewer remain
            WrongTurn: If ``player_id`` is not the mover
            AttackError: If the attack is rejected
            SplitError: If the split is rejected
        """
        if len(self.players) <= 1:
            raise GameIsOver("The game is over")
        mover_id = self.players[0].player_id
        if player_id is not None and player_id != mover_id:
            raise WrongTurn(f"Not player {player_id}'s turn (current: {mover_id})")

        if isinstance(action, Attack):
            self.attack(action.target_offset, action.attacking_hand, action.defending_hand)
        elif isinstance(action, Split):
            self.split(action.new_hands)
        else:
            raise TypeError(f"Unknown action: {action!r}")

    def attack(self, offset: int, attacking_hand: int, defending_hand: int) -> None:
        """The mover uses ``attacking_hand`` on ``defending_hand`` of the player ``offset`` turns ahead.

        Raises:
            PlayerAttackSelf: If ``offset`` is 0
            PlayerIndexOutOfBounds: If ``offset`` is not within the roster
            HandIndexOutOfBounds: If a hand index is out of bounds
            HandIsNotAlive: If the attacking or defending hand is dead
        """
        n_hands = self.config.n_hands
        if offset == 0:
            logger.debug("Rejected attack: player attacks self")
            raise PlayerAttackSelf("A player cannot attack itself")
        if not 0 < offset < len(self.players):
            logger.debug("Rejected attack: player offset %d out of bounds", offset)
            raise PlayerIndexOutOfBounds(
                f"Player offset {offset} out of range [1, {len(self.players)})"
            )
        if not (0 <= attacking_hand < n_hands and 0 <= defending_hand < n_hands):
            logger.debug(
                "Rejected attack: hand index out of bounds (%d, %d)", attacking_hand, defending_hand
            )
            raise HandIndexOutOfBounds(
                f"Hand indexes ({attacking_hand}, {defending_hand}) out of range [0, {n_hands})"
            )

        attacker = self.players[0].hands[attacking_hand]
        defending_player = self.players[offset]
        defender = defending_player.hands[defending_hand]
        if attacker == 0 or defender == 0:
            logger.debug("Rejected attack: hand is not alive")
            raise HandIsNotAlive("The attacking and defending hands must be alive")

        defending_player.hands[defending_hand] = (defender + attacker) % self.config.rollover
        defending_player.hands.sort()
        if defending_player.is_eliminated:
            logger.debug("Player %d eliminated", defending_player.player_id)
            del self.players[offset]
        self._advance_turn()

    def split(self, new_hands: Sequence[int]) -> None:
        """The mover transfers or divides its fingers among its hands.

        Raises:
            InvalidHandLen: If ``new_hands`` does not have one value per hand
            MoveWithoutChange: If the sorted ``new_hands`` equal the current hands
            InvalidTotalFingers: If the total number of fingers changes
            InvalidFingerValue: If any new hand is outside [1, rollover)
        """
        if len(new_hands) != self.config.n_hands:
            logger.debug("Rejected split: %d hands given", len(new_hands))
            raise InvalidHandLen(f"Expected {self.config.n_hands} hands, got {len(new_hands)}")

        sorted_hands = sorted(int(h) for h in new_hands)
        mover = self.players[0]
        if sorted_hands == mover.hands:
            logger.debug("Rejected split: no change")
            raise MoveWithoutChange(f"Split {sorted_hands} does not change the hands")
        if sum(sorted_hands) != mover.total_fingers:
            logger.debug("Rejected split: total changed")
            raise InvalidTotalFingers(
                f"Split total {sum(sorted_hands)} differs from {mover.total_fingers}"
            )
        if any(not 1 <= h < self.config.rollover for h in sorted_hands):
            logger.debug("Rejected split: invalid finger value")
            raise InvalidFingerValue(
                f"Split {sorted_hands} has a value outside [1, {self.config.rollover})"
            )

        mover.hands = sorted_hands
        self._advance_turn()

    def _advance_turn(self) -> None:
        """Rotate the roster so the next player moves."""
        self.players.rotate(-1)

    def copy(self) -> "GameState":
        """Create a deep copy of the game state."""
        return GameState(
            players=deque(player.copy() for player in self.players),
            config=self.config,
        )

    def __str__(self) -> str:
        """String representation of game state."""
        lines = [f"GameState ({self.abbreviation()})"]
        for offset, player in enumerate(self.players):
            marker = " *" if offset == 0 else ""
            hands = ", ".join(str(h) for h in player.hands)
            lines.append(f"  Player {player.player_id}: [{hands}]{marker}")
        return "\n".join(lines)


Position = GameState
