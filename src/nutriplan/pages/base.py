"""Shared behavior for page controllers."""

from nutriplan.presentation.screen import Screen
from nutriplan.services.router import HashRouter


class PageController:
    """Base for pages activated by the router.

    A page remembers the navigation generation it was activated in and only
    publishes to the screen while that navigation is still current.
    """

    router: HashRouter
    screen: Screen
    _generation: int

    def _activate(self) -> int:
        self._generation = self.router.generation
        return self._generation

    def _is_active(self) -> bool:
        return self.router.is_current(getattr(self, "_generation", -1))
