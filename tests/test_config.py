"""Tests for the rule configuration.

Tests cover:
- Defaults and derived serial bases
- Validation errors
- Overflow detection
- Known cycles per configuration
- Error taxonomy relationships
"""

import pytest

from chopsticks.rules import (
    ChopsticksConfig,
    ConfigError,
    DEFAULT_CONFIG,
    MAX_SERIAL,
    known_cycles,
    ActionError,
    AttackError,
    ChopsticksError,
    InvalidTotalFingers,
    InvalidTotalRollover,
    PlayerAttackSelf,
    PlayerIndexOutOfBounds,
    SplitError,
    InvalidFingerValue,
)


class TestDefaults:
    """Tests for the default configuration."""

    def test_default_values(self):
        """Default game is 2 players, 2 hands, rollover 5, 1 finger."""
        assert DEFAULT_CONFIG.n_players == 2
        assert DEFAULT_CONFIG.n_hands == 2
        assert DEFAULT_CONFIG.rollover == 5
        assert DEFAULT_CONFIG.initial_fingers == 1

    def test_default_serial_bases(self):
        """Derived serial bases follow the numbering scheme."""
        assert DEFAULT_CONFIG.player_serial_base == 25
        assert DEFAULT_CONFIG.attack_serial_base == 8
        assert DEFAULT_CONFIG.action_serial_base == 33
        assert DEFAULT_CONFIG.state_serial_base == 25 * 25 * 2
        assert DEFAULT_CONFIG.state_action_serial_base == 1250 * 33

    def test_config_is_frozen(self):
        """Configurations cannot be mutated."""
        with pytest.raises(AttributeError):
            DEFAULT_CONFIG.n_players = 3  # type: ignore[misc]

    def test_with_helpers_return_new_config(self):
        """with_* helpers replace a single field."""
        config = DEFAULT_CONFIG.with_n_players(3).with_rollover(7)
        assert config.n_players == 3
        assert config.rollover == 7
        assert config.n_hands == 2
        assert DEFAULT_CONFIG.n_players == 2

    def test_str_mentions_fields(self):
        """String form names every field."""
        text = str(ChopsticksConfig(n_players=3, n_hands=4, rollover=6, initial_fingers=2))
        assert "players=3" in text
        assert "hands=4" in text
        assert "rollover=6" in text
        assert "initial=2" in text


class TestValidation:
    """Tests for configuration validation."""

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"n_players": 1},
            {"n_hands": 0},
            {"initial_fingers": 0},
            {"initial_fingers": 5},
            {"rollover": 1},
        ],
    )
    def test_invalid_configs_raise(self, kwargs):
        """Out-of-range fields raise ConfigError."""
        with pytest.raises(ConfigError):
            ChopsticksConfig(**kwargs)

    def test_config_error_is_value_error(self):
        """ConfigError is a ValueError."""
        assert issubclass(ConfigError, ValueError)

    def test_overflow_is_rejected(self):
        """Configurations whose serials overflow int64 are rejected."""
        with pytest.raises(ConfigError):
            ChopsticksConfig(n_players=8, n_hands=8, rollover=10)

    def test_largest_valid_serial_fits(self):
        """A sizeable valid configuration stays within int64."""
        config = ChopsticksConfig(n_players=3, n_hands=3, rollover=5)
        assert config.state_action_serial_base - 1 <= MAX_SERIAL


class TestKnownCycles:
    """Tests for known non-terminating positions."""

    def test_default_config_has_cycle(self):
        """The default game knows the 0102 cycle."""
        assert known_cycles(DEFAULT_CONFIG) == frozenset({"0102"})

    def test_other_configs_have_none(self):
        """Other configurations know no cycles."""
        assert known_cycles(DEFAULT_CONFIG.with_n_players(3)) == frozenset()
        assert known_cycles(DEFAULT_CONFIG.with_rollover(6)) == frozenset()


class TestErrorTaxonomy:
    """Tests for the error class hierarchy."""

    def test_attack_self_is_index_error(self):
        """Attacking oneself is a player index error."""
        assert issubclass(PlayerAttackSelf, PlayerIndexOutOfBounds)
        assert issubclass(PlayerIndexOutOfBounds, AttackError)

    def test_rollover_alias(self):
        """InvalidTotalRollover is the same class as InvalidTotalFingers."""
        assert InvalidTotalRollover is InvalidTotalFingers

    def test_action_errors_share_root(self):
        """Every rejection derives from ActionError and ChopsticksError."""
        for cls in (AttackError, SplitError, InvalidFingerValue):
            assert issubclass(cls, ActionError)
            assert issubclass(cls, ChopsticksError)
