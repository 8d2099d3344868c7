"""
Bullet Screen Configuration

Process-wide defaults for a BulletScreen plus the per-item overrides merged
over them at submission time. Merging always produces a new instance;
a merged ScreenOptions is never mutated afterwards.
"""

import dataclasses
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, Union

from jsonschema import Draft7Validator

from bulletlanes.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_DURATION_SECONDS = 10.0

# Schema for the JSON-serializable subset of the options (callbacks excluded)
OPTIONS_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "lane_height": {"type": "number", "exclusiveMinimum": 0},
        "pause_on_hover": {"type": "boolean"},
        "pause_on_click": {"type": "boolean"},
        "duration": {"type": ["string", "number"]},
        "speed": {"type": ["number", "null"], "exclusiveMinimum": 0},
        "lane_speeds": {
            "type": "array",
            "items": {"type": ["number", "null"], "minimum": 0},
        },
    },
    "additionalProperties": False,
}

_OPTIONS_VALIDATOR = Draft7Validator(OPTIONS_SCHEMA)

# camelCase spellings accepted from JS-style configs
_ALIASES = {
    'laneHeight': 'lane_height',
    'trackHeight': 'lane_height',
    'pauseOnHover': 'pause_on_hover',
    'pauseOnClick': 'pause_on_click',
    'onStart': 'on_start',
    'onEnd': 'on_end',
    'perLaneSpeed': 'lane_speeds',
    'trackArr': 'lane_speeds',
    'track_speeds': 'lane_speeds',
}

ItemCallback = Callable[[str, Any], None]
LaneSpeedEntry = Union[float, int, Mapping[str, Any], None]


def _normalize_lane_speeds(entries: Any) -> Tuple[Optional[float], ...]:
    """Accept plain numbers or {'speed': n} mappings, as in per-track objects."""
    if entries is None:
        return ()
    if isinstance(entries, (str, bytes)) or not hasattr(entries, '__iter__'):
        raise ConfigurationError("lane_speeds must be a sequence", field='lane_speeds')
    normalized = []
    for entry in entries:
        if isinstance(entry, Mapping):
            entry = entry.get('speed')
        normalized.append(entry)
    return tuple(normalized)


def parse_duration(value: Any) -> float:
    """
    Parse a duration such as "10", "10s", "2.5s" or 7.

    Unparsable or non-positive values fall back to the default duration.
    """
    if isinstance(value, bool):
        return DEFAULT_DURATION_SECONDS
    if isinstance(value, (int, float)):
        seconds = float(value)
    elif isinstance(value, str):
        text = value.strip().lower()
        if text.endswith('s'):
            text = text[:-1].strip()
        try:
            seconds = float(text)
        except ValueError:
            logger.warning("Unparsable duration %r, using %.1fs", value, DEFAULT_DURATION_SECONDS)
            return DEFAULT_DURATION_SECONDS
    else:
        return DEFAULT_DURATION_SECONDS
    if seconds <= 0:
        return DEFAULT_DURATION_SECONDS
    return seconds


@dataclass(frozen=True)
class ScreenOptions:
    """Options for a bullet screen and, once merged, for a single item."""

    # Lane geometry
    lane_height: float = 40

    # Interaction
    pause_on_hover: bool = True
    pause_on_click: bool = True

    # Lifecycle callbacks, called with (item_id, screen)
    on_start: Optional[ItemCallback] = None
    on_end: Optional[ItemCallback] = None

    # Timing: speed (px/s) wins over duration when set
    duration: Union[str, float] = "10"
    speed: Optional[float] = None
    lane_speeds: Tuple[Optional[float], ...] = field(default_factory=tuple)

    def __post_init__(self):
        # Freeze lane table into a tuple of plain numbers
        object.__setattr__(self, 'lane_speeds', _normalize_lane_speeds(self.lane_speeds))

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> 'ScreenOptions':
        """
        Create ScreenOptions from a main configuration dictionary.

        Args:
            config: Main config dict (expects config['bullet_screen'])

        Returns:
            ScreenOptions instance
        """
        section = config.get('bullet_screen', {}) or {}
        return cls().merged(section)

    def merged(self, overrides: Optional[Union[Mapping[str, Any], 'ScreenOptions']] = None) -> 'ScreenOptions':
        """
        Return a new ScreenOptions with overrides applied.

        Args:
            overrides: Mapping of option name to value (snake_case or camelCase)

        Raises:
            ConfigurationError: If an option name is not recognized
        """
        if overrides is None:
            return self
        if isinstance(overrides, ScreenOptions):
            return overrides

        known = {f.name for f in dataclasses.fields(self)}
        changes = {}
        for key, value in overrides.items():
            name = _ALIASES.get(key, key)
            if name not in known:
                raise ConfigurationError(f"Unknown option '{key}'", field=key)
            changes[name] = value
        return dataclasses.replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        """Convert the serializable options to a dictionary."""
        return {
            'lane_height': self.lane_height,
            'pause_on_hover': self.pause_on_hover,
            'pause_on_click': self.pause_on_click,
            'duration': self.duration,
            'speed': self.speed,
            'lane_speeds': list(self.lane_speeds),
        }

    def validate(self) -> List[str]:
        """
        Validate option values.

        Returns:
            List of validation error messages (empty if valid)
        """
        errors = []
        for error in _OPTIONS_VALIDATOR.iter_errors(self.to_dict()):
            path = '.'.join(str(p) for p in error.absolute_path) or '<root>'
            errors.append(f"Field {path}: {error.message}")

        for name in ('on_start', 'on_end'):
            callback = getattr(self, name)
            if callback is not None and not callable(callback):
                errors.append(f"Field {name}: must be callable, got {type(callback).__name__}")

        return errors

    @property
    def uses_fixed_speed(self) -> bool:
        """True when a global speed or a lane speed table is configured."""
        return bool(self.speed) or bool(self.lane_speeds)

    def duration_seconds(self) -> float:
        return parse_duration(self.duration)

    def speed_for_lane(self, lane_index: int) -> Optional[float]:
        """Lane table entry when set and non-zero, else the global speed."""
        if 0 <= lane_index < len(self.lane_speeds):
            lane_speed = self.lane_speeds[lane_index]
            if lane_speed:
                return float(lane_speed)
        if self.speed:
            return float(self.speed)
        return None

    def item_duration(self, viewport_width: float, item_width: float, lane_index: int) -> float:
        """
        Seconds an item of the given width needs to cross the viewport on a lane.

        With a speed the whole travel distance (viewport plus item) is covered
        at that speed; otherwise the configured duration is used as-is.
        """
        speed = self.speed_for_lane(lane_index)
        if speed:
            return (viewport_width + item_width) / speed
        return self.duration_seconds()
