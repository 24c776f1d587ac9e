"""
Session Store.

Holds the current SessionState and applies transforms to it. The store is
only touched from the event loop thread, so an apply() call is atomic with
respect to key handling, poll ticks and network completions.
"""

from collections.abc import Callable

from arcana.session.state import SessionState, Transform

Listener = Callable[[SessionState], None]


class SessionStore:
    """
    Single source of truth for an interactive session.

    Usage:
        store = SessionStore(SessionState(working_directory=os.getcwd()))
        unsubscribe = store.subscribe(render)
        store.apply(append_entries(TranscriptEntry("info", "hello")))
    """

    def __init__(self, state: SessionState) -> None:
        self._state = state
        self._listeners: list[Listener] = []

    @property
    def state(self) -> SessionState:
        return self._state

    def apply(self, *transforms: Transform) -> SessionState:
        """
        Run transforms in order against the current state and publish the result.

        Listeners are notified once per call, and only if something changed.
        """
        state = self._state
        for transform in transforms:
            state = transform(state)
        if state is not self._state:
            self._state = state
            for listener in list(self._listeners):
                listener(state)
        return state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a change listener. Returns a function that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe
