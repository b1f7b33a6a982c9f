"""Screen navigation: landing -> input -> dashboard."""

import logging
from enum import Enum
from typing import Callable, Optional

from pydantic import BaseModel, ConfigDict

from app.models import RiskAnalysis, StudentData

logger = logging.getLogger(__name__)


class Screen(str, Enum):
    LANDING = "landing"
    INPUT = "input"
    DASHBOARD = "dashboard"


class NavigationEvent(str, Enum):
    GET_STARTED = "get_started"
    SUBMIT = "submit"
    BACK = "back"
    START_OVER = "start_over"


class InvalidTransitionError(ValueError):
    """Raised when an event is not allowed on the current screen."""


class ScreenState(BaseModel):
    """Active screen plus the last submitted StudentData."""
    model_config = ConfigDict(frozen=True)

    screen: Screen = Screen.LANDING
    student_data: Optional[StudentData] = None


def parse_event(value: str) -> NavigationEvent:
    """Accept 'start_over', 'startOver' or 'start-over'."""
    value = str(value).strip()
    if value.isupper():
        value = value.lower()
    key = ''.join('_' + c.lower() if c.isupper() else c for c in value)
    key = key.replace('-', '_').strip('_')
    try:
        return NavigationEvent(key)
    except ValueError:
        raise InvalidTransitionError(f"Unknown navigation event: {value!r}")


def parse_screen(value: str) -> Screen:
    try:
        return Screen(str(value).strip().lower())
    except ValueError:
        raise InvalidTransitionError(f"Unknown screen: {value!r}")


def transition(
    state: ScreenState,
    event: NavigationEvent,
    data: Optional[StudentData] = None
) -> ScreenState:
    """
    Apply a navigation event.

    Args:
        state: Current state
        event: Event raised by the presentation layer
        data: Submitted StudentData (required for SUBMIT)

    Returns:
        New ScreenState; the input state is not modified

    Raises:
        InvalidTransitionError: if the event does not apply to the current screen
    """
    screen = state.screen

    if screen == Screen.LANDING and event == NavigationEvent.GET_STARTED:
        new_state = ScreenState(screen=Screen.INPUT, student_data=state.student_data)
    elif screen == Screen.INPUT and event == NavigationEvent.SUBMIT:
        if data is None:
            raise InvalidTransitionError("Submit requires student data")
        new_state = ScreenState(screen=Screen.DASHBOARD, student_data=data)
    elif screen == Screen.INPUT and event == NavigationEvent.BACK:
        new_state = ScreenState(screen=Screen.LANDING, student_data=state.student_data)
    elif screen == Screen.DASHBOARD and event == NavigationEvent.BACK:
        new_state = ScreenState(screen=Screen.INPUT, student_data=state.student_data)
    elif screen == Screen.DASHBOARD and event == NavigationEvent.START_OVER:
        new_state = ScreenState(screen=Screen.INPUT, student_data=None)
    else:
        raise InvalidTransitionError(
            f"Event '{event.value}' is not allowed on the {screen.value} screen"
        )

    logger.debug("Navigation: %s --%s--> %s", screen.value, event.value, new_state.screen.value)
    return new_state


class ScreenController:
    """
    Owns the navigation state and the analysis shown on the dashboard.

    The analysis is recomputed only when the stored StudentData changes.
    """

    def __init__(
        self,
        analyzer: Optional[Callable[[StudentData], RiskAnalysis]] = None,
        state: Optional[ScreenState] = None
    ):
        if analyzer is None:
            from app.risk import analyze
            analyzer = analyze
        self._analyzer = analyzer
        self.state = state or ScreenState()
        self._cached_for: Optional[StudentData] = None
        self._cached_analysis: Optional[RiskAnalysis] = None

    @property
    def screen(self) -> Screen:
        return self.state.screen

    @property
    def student_data(self) -> Optional[StudentData]:
        return self.state.student_data

    def dispatch(self, event: NavigationEvent, data: Optional[StudentData] = None) -> ScreenState:
        self.state = transition(self.state, event, data)
        return self.state

    def get_started(self) -> ScreenState:
        return self.dispatch(NavigationEvent.GET_STARTED)

    def submit(self, data: StudentData) -> ScreenState:
        return self.dispatch(NavigationEvent.SUBMIT, data)

    def back(self) -> ScreenState:
        return self.dispatch(NavigationEvent.BACK)

    def start_over(self) -> ScreenState:
        return self.dispatch(NavigationEvent.START_OVER)

    def analysis(self) -> Optional[RiskAnalysis]:
        """Analysis for the dashboard; None on the other screens."""
        data = self.state.student_data
        if self.state.screen != Screen.DASHBOARD or data is None:
            return None
        if self._cached_analysis is None or self._cached_for != data:
            self._cached_analysis = self._analyzer(data)
            self._cached_for = data
        return self._cached_analysis
