"""
Per-item pause state machine.

An item can be paused by the user (click or explicit pause) and by the
pointer hovering over it. The two sources are tracked separately and the
item only plays again once both are cleared, so leaving an item with the
pointer never resumes something the user paused on purpose.
"""

from enum import Enum
from typing import Dict, Tuple


class PlayState(Enum):
    PLAYING = "playing"
    PAUSED_BY_USER = "paused_by_user"
    PAUSED_BY_HOVER = "paused_by_hover"
    PAUSED_BY_BOTH = "paused_by_both"

    @property
    def is_paused(self) -> bool:
        return self is not PlayState.PLAYING

    @property
    def paused_by_user(self) -> bool:
        return self in (PlayState.PAUSED_BY_USER, PlayState.PAUSED_BY_BOTH)

    @property
    def paused_by_hover(self) -> bool:
        return self in (PlayState.PAUSED_BY_HOVER, PlayState.PAUSED_BY_BOTH)

    @property
    def engine_state(self) -> str:
        """Play state string understood by the motion engine."""
        return 'paused' if self.is_paused else 'running'


class PauseEvent(Enum):
    USER_PAUSE = "user_pause"
    USER_RESUME = "user_resume"
    HOVER_ENTER = "hover_enter"
    HOVER_LEAVE = "hover_leave"


_P = PlayState
_E = PauseEvent

TRANSITIONS: Dict[Tuple[PlayState, PauseEvent], PlayState] = {
    (_P.PLAYING, _E.USER_PAUSE): _P.PAUSED_BY_USER,
    (_P.PLAYING, _E.USER_RESUME): _P.PLAYING,
    (_P.PLAYING, _E.HOVER_ENTER): _P.PAUSED_BY_HOVER,
    (_P.PLAYING, _E.HOVER_LEAVE): _P.PLAYING,

    (_P.PAUSED_BY_USER, _E.USER_PAUSE): _P.PAUSED_BY_USER,
    (_P.PAUSED_BY_USER, _E.USER_RESUME): _P.PLAYING,
    (_P.PAUSED_BY_USER, _E.HOVER_ENTER): _P.PAUSED_BY_BOTH,
    (_P.PAUSED_BY_USER, _E.HOVER_LEAVE): _P.PAUSED_BY_USER,

    (_P.PAUSED_BY_HOVER, _E.USER_PAUSE): _P.PAUSED_BY_BOTH,
    (_P.PAUSED_BY_HOVER, _E.USER_RESUME): _P.PAUSED_BY_HOVER,
    (_P.PAUSED_BY_HOVER, _E.HOVER_ENTER): _P.PAUSED_BY_HOVER,
    (_P.PAUSED_BY_HOVER, _E.HOVER_LEAVE): _P.PLAYING,

    (_P.PAUSED_BY_BOTH, _E.USER_PAUSE): _P.PAUSED_BY_BOTH,
    (_P.PAUSED_BY_BOTH, _E.USER_RESUME): _P.PAUSED_BY_HOVER,
    (_P.PAUSED_BY_BOTH, _E.HOVER_ENTER): _P.PAUSED_BY_BOTH,
    (_P.PAUSED_BY_BOTH, _E.HOVER_LEAVE): _P.PAUSED_BY_USER,
}


def transition(state: PlayState, event: PauseEvent) -> PlayState:
    return TRANSITIONS[(state, event)]
