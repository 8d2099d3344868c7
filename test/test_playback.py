"""
Tests for the per-item pause state machine.
"""

import pytest

from bulletlanes.lanes.playback import TRANSITIONS, PauseEvent, PlayState, transition


class TestPlayState:
    """Test state flags."""

    def test_flags(self):
        """Each state reports its pause sources."""
        assert not PlayState.PLAYING.is_paused
        assert PlayState.PAUSED_BY_USER.paused_by_user
        assert not PlayState.PAUSED_BY_USER.paused_by_hover
        assert PlayState.PAUSED_BY_HOVER.paused_by_hover
        assert PlayState.PAUSED_BY_BOTH.paused_by_user
        assert PlayState.PAUSED_BY_BOTH.paused_by_hover

    def test_engine_state(self):
        """Only PLAYING maps to a running engine."""
        assert PlayState.PLAYING.engine_state == 'running'
        for state in (PlayState.PAUSED_BY_USER, PlayState.PAUSED_BY_HOVER, PlayState.PAUSED_BY_BOTH):
            assert state.engine_state == 'paused'


class TestTransitions:
    """Test the transition table."""

    def test_table_is_complete(self):
        """Every state handles every event."""
        assert len(TRANSITIONS) == len(PlayState) * len(PauseEvent)

    @pytest.mark.parametrize("state,event,expected", [
        (PlayState.PLAYING, PauseEvent.USER_PAUSE, PlayState.PAUSED_BY_USER),
        (PlayState.PLAYING, PauseEvent.HOVER_ENTER, PlayState.PAUSED_BY_HOVER),
        (PlayState.PAUSED_BY_USER, PauseEvent.HOVER_LEAVE, PlayState.PAUSED_BY_USER),
        (PlayState.PAUSED_BY_HOVER, PauseEvent.USER_RESUME, PlayState.PAUSED_BY_HOVER),
        (PlayState.PAUSED_BY_BOTH, PauseEvent.HOVER_LEAVE, PlayState.PAUSED_BY_USER),
        (PlayState.PAUSED_BY_BOTH, PauseEvent.USER_RESUME, PlayState.PAUSED_BY_HOVER),
    ])
    def test_transition(self, state, event, expected):
        """Each source only clears its own pause."""
        assert transition(state, event) is expected

    def test_resume_on_playing_is_noop(self):
        """Clearing a pause that is not set changes nothing."""
        assert transition(PlayState.PLAYING, PauseEvent.USER_RESUME) is PlayState.PLAYING
        assert transition(PlayState.PLAYING, PauseEvent.HOVER_LEAVE) is PlayState.PLAYING

    def test_both_sources_must_clear(self):
        """The item plays again only after both pauses are lifted."""
        state = PlayState.PLAYING
        for event in (PauseEvent.USER_PAUSE, PauseEvent.HOVER_ENTER, PauseEvent.HOVER_LEAVE):
            state = transition(state, event)
        assert state.is_paused
        assert transition(state, PauseEvent.USER_RESUME) is PlayState.PLAYING
