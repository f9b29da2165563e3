"""In-process host location with fragment history."""

from dataclasses import dataclass, field

from nutriplan.services.router import Location, LocationListener


@dataclass
class InMemoryLocation(Location):
    """Location that keeps a back/forward history like a browser tab."""

    initial_fragment: str = ""
    _history: list[str] = field(default_factory=list)
    _index: int = 0
    _listeners: list[LocationListener] = field(default_factory=list)

    def __post_init__(self) -> None:
        self._history = [self.initial_fragment]
        self._index = 0

    @property
    def fragment(self) -> str:
        """Return the live fragment."""
        return self._history[self._index]

    def assign(self, fragment: str) -> None:
        """Push a new fragment; assigning the current one does nothing."""
        if fragment == self.fragment:
            return
        del self._history[self._index + 1 :]
        self._history.append(fragment)
        self._index = len(self._history) - 1
        self._notify()

    def subscribe(self, listener: LocationListener) -> None:
        """Register a change listener for the lifetime of the location."""
        self._listeners.append(listener)

    def back(self) -> bool:
        """Move one entry back in history; returns False at the start."""
        if self._index == 0:
            return False
        self._index -= 1
        self._notify()
        return True

    def forward(self) -> bool:
        """Move one entry forward in history; returns False at the end."""
        if self._index >= len(self._history) - 1:
            return False
        self._index += 1
        self._notify()
        return True

    @property
    def history(self) -> list[str]:
        return list(self._history)

    def _notify(self) -> None:
        fragment = self.fragment
        for listener in list(self._listeners):
            listener(fragment)
