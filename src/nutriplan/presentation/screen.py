"""Presentation state shared by page controllers."""

from dataclasses import dataclass, field

HOME_SECTION = "all-recipes-section"
MEAL_DETAILS_SECTION = "meal-details"
PRODUCTS_SECTION = "products-section"
FOOD_LOG_SECTION = "foodlog-section"

SECTIONS = (HOME_SECTION, MEAL_DETAILS_SECTION, PRODUCTS_SECTION, FOOD_LOG_SECTION)

STATUS_IDLE = "idle"
STATUS_LOADING = "loading"
STATUS_READY = "ready"
STATUS_EMPTY = "empty"
STATUS_ERROR = "error"
STATUS_NOT_FOUND = "not_found"


@dataclass(frozen=True)
class Notice:
    """Transient confirmation shown after an action."""

    title: str
    text: str | None = None


@dataclass
class Screen:
    """What the user currently sees: one visible section and its content."""

    section: str = HOME_SECTION
    nav_index: int = 0
    title: str = ""
    subtitle: str = ""
    status: str = STATUS_IDLE
    message: str | None = None
    content: dict[str, object] = field(default_factory=dict)
    notice: Notice | None = None

    def activate(self, section: str, nav_index: int) -> None:
        """Show a section, hiding every other one."""
        if section not in SECTIONS:
            raise ValueError(f"Unknown section: {section}")
        self.section = section
        self.nav_index = nav_index
        self.status = STATUS_IDLE
        self.message = None
        self.content = {}
        self.notice = None

    def set_header(self, title: str, subtitle: str) -> None:
        self.title = title
        self.subtitle = subtitle

    def show_loading(self) -> None:
        self.status = STATUS_LOADING
        self.message = None

    def show_content(
        self,
        content: dict[str, object],
        status: str = STATUS_READY,
        message: str | None = None,
    ) -> None:
        """Replace the section content."""
        self.content = content
        self.status = status
        self.message = message

    def show_error(self, message: str) -> None:
        self.status = STATUS_ERROR
        self.message = message

    def show_not_found(self, message: str) -> None:
        self.status = STATUS_NOT_FOUND
        self.message = message

    def notify(self, title: str, text: str | None = None) -> None:
        self.notice = Notice(title=title, text=text)

    def snapshot(self) -> dict[str, object]:
        """Return a JSON-serializable view of the screen."""
        return {
            "section": self.section,
            "nav_index": self.nav_index,
            "title": self.title,
            "subtitle": self.subtitle,
            "status": self.status,
            "message": self.message,
            "content": self.content,
            "notice": (
                {"title": self.notice.title, "text": self.notice.text}
                if self.notice
                else None
            ),
        }
