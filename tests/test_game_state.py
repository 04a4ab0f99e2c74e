"""Tests for the rule engine.

Tests cover:
- New game setup and status
- Attack arithmetic, sorting and turn rotation
- Attack rejections in order of precedence
- Split validation and valid transfers and divisions
- Elimination and roster order
- Turn ownership and game over
- The short game from the opening to a win
"""

import logging
from collections import deque

import pytest

from chopsticks.rules import (
    Attack,
    Split,
    ChopsticksConfig,
    DEFAULT_CONFIG,
    ActionError,
    AttackError,
    SplitError,
    GameIsOver,
    WrongTurn,
    PlayerAttackSelf,
    PlayerIndexOutOfBounds,
    HandIndexOutOfBounds,
    HandIsNotAlive,
    InvalidHandLen,
    MoveWithoutChange,
    InvalidTotalRollover,
    InvalidFingerValue,
)
from chopsticks.engine.game_state import GameState, Player, Position, Turn, Over


class TestNewGame:
    """Tests for game initialization."""

    def test_default_abbreviation(self):
        """A default game starts as 1111 with player 0 to move."""
        state = GameState.new_game()
        assert state.abbreviation() == "1111"
        assert state.status() == Turn(active_id=0)

    def test_players_in_id_order(self):
        """Players start in ascending id order."""
        state = GameState.new_game(DEFAULT_CONFIG.with_n_players(4))
        assert state.player_ids() == [0, 1, 2, 3]

    def test_initial_fingers_and_hands(self):
        """Every hand starts at initial_fingers."""
        config = ChopsticksConfig(n_players=3, n_hands=3, rollover=7, initial_fingers=2)
        state = GameState.new_game(config)
        for player in state.players:
            assert player.hands == [2, 2, 2]

    def test_position_alias(self):
        """Position is another name for GameState."""
        assert Position is GameState

    def test_players_is_deque(self):
        """The roster is a deque even when built from a list."""
        state = GameState(players=[Player(0, [1, 1]), Player(1, [1, 2])])
        assert isinstance(state.players, deque)


class TestPlayer:
    """Tests for Player helpers."""

    def test_eliminated_when_largest_hand_dead(self):
        """A player with all hands at 0 is eliminated."""
        assert Player(0, [0, 0]).is_eliminated
        assert not Player(0, [0, 1]).is_eliminated

    def test_no_hands_is_invariant_violation(self):
        """A player without hands raises RuntimeError."""
        with pytest.raises(RuntimeError):
            _ = Player(0, []).is_eliminated

    def test_alive_hand_indexes(self):
        """Live hands are the non-zero suffix."""
        assert list(Player(0, [0, 0, 3]).alive_hand_indexes()) == [2]
        assert list(Player(0, [1, 2]).alive_hand_indexes()) == [0, 1]
        assert list(Player(0, [0, 0]).alive_hand_indexes()) == []


class TestFromHands:
    """Tests for building states from seat-indexed hands."""

    def test_rotates_to_mover(self):
        """The roster starts at the mover and wraps in id order."""
        config = DEFAULT_CONFIG.with_n_players(3)
        state = GameState.from_hands([[1, 1], [1, 2], [2, 2]], config=config, mover_id=1)
        assert state.player_ids() == [1, 2, 0]

    def test_drops_eliminated_players(self):
        """All-zero players are left out."""
        config = DEFAULT_CONFIG.with_n_players(3)
        state = GameState.from_hands([[1, 1], [0, 0], [2, 2]], config=config, mover_id=2)
        assert state.player_ids() == [2, 0]

    def test_sorts_hands(self):
        """Hands are stored ascending."""
        state = GameState.from_hands([[3, 1], [1, 1]])
        assert state.players[0].hands == [1, 3]

    @pytest.mark.parametrize(
        "hands, mover_id",
        [
            ([[1, 1]], 0),
            ([[1, 1, 1], [1, 1, 1]], 0),
            ([[1, 5], [1, 1]], 0),
            ([[0, 0], [1, 1]], 0),
        ],
    )
    def test_invalid_input_raises(self, hands, mover_id):
        """Hands that do not fit the configuration raise ValueError."""
        with pytest.raises(ValueError):
            GameState.from_hands(hands, mover_id=mover_id)


class TestAttack:
    """Tests for attacks."""

    def test_attack_with_one(self):
        """1111 -> attack(1, 0, 0) leaves player 1 to move with [1, 2]."""
        state = GameState.new_game()
        state.attack(1, 0, 0)
        assert state.players[0].player_id == 1
        assert state.players[0].hands == [1, 2]
        assert state.abbreviation() == "1211"

    def test_attack_with_four_kills_hand(self):
        """Reaching the rollover kills the hand; hands are re-sorted."""
        state = GameState.from_hands([[1, 4], [1, 1]])
        state.attack(1, 1, 1)
        assert state.players[0].player_id == 1
        assert state.players[0].hands == [0, 1]

    def test_wrap_arithmetic(self):
        """The defending hand becomes (defender + attacker) % rollover."""
        state = GameState.from_hands([[3, 4], [2, 3]])
        state.attack(1, 1, 1)
        # 3 + 4 = 7 -> 2
        assert state.players[0].hands == [2, 2]

    def test_attacking_hand_unchanged(self):
        """The attacker's hands do not change."""
        state = GameState.from_hands([[2, 3], [1, 1]])
        state.attack(1, 0, 0)
        assert state.get_player(0).hands == [2, 3]

    def test_attack_self(self):
        """Offset 0 raises PlayerAttackSelf."""
        state = GameState.new_game()
        with pytest.raises(PlayerAttackSelf):
            state.attack(0, 0, 0)

    def test_attack_self_is_out_of_bounds(self):
        """PlayerAttackSelf can be caught as PlayerIndexOutOfBounds."""
        state = GameState.new_game()
        with pytest.raises(PlayerIndexOutOfBounds):
            state.attack(0, 0, 0)

    @pytest.mark.parametrize("offset", [2, 3, -1])
    def test_player_out_of_bounds(self, offset):
        """Offsets outside the roster raise PlayerIndexOutOfBounds."""
        state = GameState.new_game()
        with pytest.raises(PlayerIndexOutOfBounds):
            state.attack(offset, 0, 0)

    @pytest.mark.parametrize("hands", [(2, 0), (0, 2), (-1, 0)])
    def test_hand_out_of_bounds(self, hands):
        """Hand indexes outside [0, n_hands) raise HandIndexOutOfBounds."""
        state = GameState.new_game()
        with pytest.raises(HandIndexOutOfBounds):
            state.attack(1, *hands)

    def test_attacker_is_zero(self):
        """A dead attacking hand raises HandIsNotAlive."""
        state = GameState.from_hands([[0, 1], [1, 1]])
        with pytest.raises(HandIsNotAlive):
            state.attack(1, 0, 0)

    def test_defender_is_zero(self):
        """A dead defending hand raises HandIsNotAlive."""
        state = GameState.from_hands([[1, 1], [0, 1]])
        with pytest.raises(HandIsNotAlive):
            state.attack(1, 0, 0)

    def test_rejection_leaves_state_unchanged(self):
        """A rejected attack does not modify the state."""
        state = GameState.from_hands([[1, 1], [0, 1]])
        before = state.abbreviation()
        with pytest.raises(HandIsNotAlive):
            state.attack(1, 0, 0)
        assert state.abbreviation() == before
        assert state.player_ids() == [0, 1]

    def test_rejection_is_logged(self, caplog):
        """Rejected actions are logged at DEBUG level."""
        state = GameState.new_game()
        with caplog.at_level(logging.DEBUG, logger="chopsticks.engine.game_state"):
            with pytest.raises(PlayerAttackSelf):
                state.attack(0, 0, 0)
        assert "Rejected attack" in caplog.text


class TestSplit:
    """Tests for splits."""

    @pytest.mark.parametrize("new_hands", [[0, 2], [2, 0]])
    def test_split_with_zero(self, new_hands):
        """[1, 1] split into a dead hand raises InvalidFingerValue."""
        state = GameState.new_game()
        with pytest.raises(InvalidFingerValue):
            state.split(new_hands)

    @pytest.mark.parametrize("new_hands", [[5, 3], [3, 5]])
    def test_split_with_five(self, new_hands):
        """Values at the rollover raise InvalidFingerValue."""
        state = GameState.from_hands([[4, 4], [1, 1]])
        with pytest.raises(InvalidFingerValue):
            state.split(new_hands)

    def test_split_invalid_total(self):
        """[1, 1] split into [1, 2] raises InvalidTotalRollover."""
        state = GameState.new_game()
        with pytest.raises(InvalidTotalRollover):
            state.split([1, 2])

    @pytest.mark.parametrize("new_hands", [[1, 2], [2, 1]])
    def test_split_no_update(self, new_hands):
        """Reordering the current hands raises MoveWithoutChange."""
        state = GameState.from_hands([[1, 2], [1, 1]])
        with pytest.raises(MoveWithoutChange):
            state.split(new_hands)

    def test_split_wrong_length(self):
        """A split with the wrong number of hands raises InvalidHandLen."""
        state = GameState.new_game()
        with pytest.raises(InvalidHandLen):
            state.split([2])

    @pytest.mark.parametrize(
        "before, after",
        [
            # Divisions
            ((0, 2), (1, 1)),
            ((0, 3), (1, 2)),
            ((0, 4), (1, 3)),
            ((0, 4), (2, 2)),
            # Transfers
            ((1, 3), (2, 2)),
            ((2, 2), (1, 3)),
            ((1, 4), (2, 3)),
            ((2, 3), (1, 4)),
            ((2, 4), (3, 3)),
            ((3, 3), (2, 4)),
        ],
    )
    def test_valid_splits(self, before, after):
        """Divisions and transfers replace the mover's hands and rotate."""
        state = GameState.from_hands([list(before), [1, 1]])
        state.split(list(after))
        assert state.players[0].player_id == 1
        assert state.get_player(0).hands == list(after)

    def test_split_keeps_total(self):
        """Splits conserve the mover's finger total."""
        state = GameState.from_hands([[1, 4], [1, 1]])
        state.split([3, 2])
        assert state.get_player(0).total_fingers == 5
        assert state.get_player(0).hands == [2, 3]


class TestTurnsAndElimination:
    """Tests for turn order, elimination and game over."""

    def test_three_player_rotation(self):
        """The roster rotates one step per action."""
        state = GameState.new_game(DEFAULT_CONFIG.with_n_players(3))
        state.attack(2, 0, 0)
        assert state.player_ids() == [1, 2, 0]
        state.attack(1, 0, 0)
        assert state.player_ids() == [2, 0, 1]

    def test_elimination_removes_player(self):
        """An eliminated defender leaves the roster; order is preserved."""
        config = DEFAULT_CONFIG.with_n_players(3)
        state = GameState.from_hands([[1, 4], [0, 1], [1, 1]], config=config)
        state.attack(1, 1, 1)
        assert state.player_ids() == [2, 0]
        assert state.get_player(1) is None

    def test_play_action_dispatches(self):
        """play_action applies Attack and Split actions."""
        state = GameState.new_game()
        state.play_action(Attack(1, 0, 0))
        assert state.abbreviation() == "1211"

        state = GameState.from_hands([[0, 2], [1, 1]])
        state.play_action(Split((1, 1)))
        assert state.abbreviation() == "1111"
        assert state.players[0].player_id == 1

    def test_wrong_turn(self):
        """Claiming another player's turn raises WrongTurn."""
        state = GameState.new_game()
        with pytest.raises(WrongTurn):
            state.play_action(Attack(1, 0, 0), player_id=1)

    def test_right_turn(self):
        """The mover may claim its own turn."""
        state = GameState.new_game()
        state.play_action(Attack(1, 0, 0), player_id=0)
        assert state.players[0].player_id == 1

    def test_unknown_action_type(self):
        """Unknown action types raise TypeError."""
        state = GameState.new_game()
        with pytest.raises(TypeError):
            state.play_action("attack")  # type: ignore[arg-type]

    def test_game_is_over(self):
        """Acting after the game ended raises GameIsOver."""
        state = GameState.from_hands([[1, 4], [0, 1]])
        state.attack(1, 1, 1)
        assert state.status() == Over(winner_id=0)
        with pytest.raises(GameIsOver):
            state.play_action(Attack(1, 0, 0))

    def test_game_is_over_checked_before_turn(self):
        """GameIsOver takes precedence over WrongTurn."""
        state = GameState.from_hands([[1, 4], [0, 1]])
        state.attack(1, 1, 1)
        with pytest.raises(GameIsOver):
            state.play_action(Attack(1, 0, 0), player_id=1)

    def test_out_of_context_errors_are_sequencing_errors(self):
        """Out-of-context moves raise sequencing errors, not rule errors."""
        for error in (GameIsOver, WrongTurn):
            assert issubclass(error, ActionError)
            assert not issubclass(error, (AttackError, SplitError))

    def test_empty_roster_status(self):
        """A state with no players is an invariant violation."""
        state = GameState.new_game()
        state.players.clear()
        with pytest.raises(RuntimeError):
            state.status()

    def test_status_player_id(self):
        """Turn and Over expose the player id."""
        assert Turn(active_id=3).player_id == 3
        assert Over(winner_id=2).player_id == 2

    def test_short_game(self):
        """1211 -> 1312 -> 0113 -> 1401 -> player 0 wins."""
        state = GameState.new_game()
        state.attack(1, 0, 1)
        assert state.abbreviation() == "1211"
        state.attack(1, 1, 1)
        assert state.abbreviation() == "1312"
        state.attack(1, 1, 1)
        assert state.abbreviation() == "0113"
        state.attack(1, 1, 1)
        assert state.abbreviation() == "1401"
        state.attack(1, 1, 1)
        assert state.status() == Over(winner_id=0)
        assert state.is_game_over()

    def test_copy_is_independent(self):
        """Mutating a copy leaves the original untouched."""
        state = GameState.new_game()
        clone = state.copy()
        clone.attack(1, 0, 0)
        assert state.abbreviation() == "1111"
        assert state.player_ids() == [0, 1]
        assert clone.abbreviation() == "1211"

    def test_str_marks_mover(self):
        """String form includes the abbreviation and marks the mover."""
        text = str(GameState.new_game())
        assert "1111" in text
        assert "Player 0: [1, 1] *" in text
