"""
Tests for ScreenOptions.
"""

import pytest
from unittest.mock import Mock

from bulletlanes.config import DEFAULT_DURATION_SECONDS, ScreenOptions, parse_duration
from bulletlanes.exceptions import ConfigurationError


class TestDefaults:
    """Test default option values."""

    def test_defaults(self):
        """Defaults match the documented option table."""
        options = ScreenOptions()
        assert options.lane_height == 40
        assert options.pause_on_hover is True
        assert options.pause_on_click is True
        assert options.on_start is None
        assert options.on_end is None
        assert options.duration_seconds() == 10.0
        assert options.speed is None
        assert options.lane_speeds == ()
        assert options.uses_fixed_speed is False
        assert options.validate() == []


class TestMerge:
    """Test merging overrides."""

    def test_merge_returns_new_instance(self):
        """Merging never mutates the defaults."""
        base = ScreenOptions()
        merged = base.merged({'speed': 120})
        assert merged.speed == 120
        assert base.speed is None

    def test_merge_none_is_identity(self):
        """No overrides returns the same options."""
        base = ScreenOptions()
        assert base.merged(None) is base

    def test_aliases(self):
        """camelCase and legacy track names map to option fields."""
        callback = Mock()
        merged = ScreenOptions().merged({
            'trackHeight': 30,
            'onEnd': callback,
            'trackArr': [{'speed': 150}, {'speed': 130}],
        })
        assert merged.lane_height == 30
        assert merged.on_end is callback
        assert merged.lane_speeds == (150, 130)

    def test_unknown_key(self):
        """Unrecognized keys raise ConfigurationError."""
        with pytest.raises(ConfigurationError):
            ScreenOptions().merged({'nope': 1})

    def test_options_are_frozen(self):
        """Merged options cannot be changed afterwards."""
        options = ScreenOptions().merged({'speed': 100})
        with pytest.raises(Exception):
            options.speed = 50

    def test_from_config(self):
        """from_config reads the bullet_screen section."""
        options = ScreenOptions.from_config({'bullet_screen': {'lane_height': 32, 'duration': '6s'}})
        assert options.lane_height == 32
        assert options.duration_seconds() == 6.0

    def test_from_config_without_section(self):
        """A config without the section yields defaults."""
        assert ScreenOptions.from_config({}) == ScreenOptions()


class TestValidation:
    """Test validate()."""

    def test_negative_speed(self):
        """Speed must be positive."""
        errors = ScreenOptions(speed=-5).validate()
        assert any('speed' in e for e in errors)

    def test_zero_lane_height(self):
        """Lane height must be positive."""
        errors = ScreenOptions(lane_height=0).validate()
        assert any('lane_height' in e for e in errors)

    def test_non_boolean_flag(self):
        """Pause flags must be booleans."""
        errors = ScreenOptions(pause_on_hover='yes').validate()
        assert any('pause_on_hover' in e for e in errors)

    def test_non_callable_callback(self):
        """Callbacks must be callable."""
        errors = ScreenOptions(on_start='print').validate()
        assert errors == ["Field on_start: must be callable, got str"]

    def test_lane_speeds_must_be_sequence(self):
        """A scalar lane table is rejected at construction."""
        with pytest.raises(ConfigurationError):
            ScreenOptions(lane_speeds=5)


class TestTiming:
    """Test duration parsing and speed lookup."""

    @pytest.mark.parametrize("value,expected", [
        ("10", 10.0),
        ("10s", 10.0),
        (" 2.5s ", 2.5),
        (7, 7.0),
        (0.5, 0.5),
        ("fast", DEFAULT_DURATION_SECONDS),
        ("-3", DEFAULT_DURATION_SECONDS),
        (0, DEFAULT_DURATION_SECONDS),
        (None, DEFAULT_DURATION_SECONDS),
        (True, DEFAULT_DURATION_SECONDS),
    ])
    def test_parse_duration(self, value, expected):
        """Durations accept numbers and '<n>s' strings with a safe fallback."""
        assert parse_duration(value) == expected

    def test_lane_speed_wins_over_global(self):
        """A lane table entry takes precedence over the global speed."""
        options = ScreenOptions(speed=100, lane_speeds=(150, None, 0))
        assert options.speed_for_lane(0) == 150
        assert options.speed_for_lane(1) == 100
        assert options.speed_for_lane(2) == 100
        assert options.speed_for_lane(5) == 100

    def test_no_speed(self):
        """Without any speed, lanes have no speed."""
        assert ScreenOptions().speed_for_lane(0) is None

    def test_item_duration_from_speed(self):
        """Speed-based duration covers viewport plus item width."""
        options = ScreenOptions(speed=100)
        assert options.item_duration(1000, 100, 0) == pytest.approx(11.0)

    def test_item_duration_fallback(self):
        """Without speed the configured duration is returned."""
        options = ScreenOptions(duration='4s')
        assert options.item_duration(1000, 100, 0) == 4.0

    def test_fixed_speed_with_lane_table_only(self):
        """A lane table alone switches to the fixed-speed regime."""
        assert ScreenOptions(lane_speeds=[120]).uses_fixed_speed
