"""User-facing notices raised while serving a view."""
import logging
from typing import Callable, Literal, Optional

from pydantic import BaseModel

logger = logging.getLogger(__name__)


class Notice(BaseModel):
    """A toast shown to the visitor."""

    variant: Literal["default", "destructive"] = "default"
    title: str
    description: str


class NoticeBoard:
    """Collects the notices raised during one request or socket session."""

    def __init__(self) -> None:
        self.notices: list[Notice] = []
        self.listeners: list[Callable[[Notice], None]] = []

    def toast(self, notice: Notice) -> None:
        logger.debug("Toast (%s): %s", notice.variant, notice.description)
        self.notices.append(notice)
        for listener in self.listeners:
            listener(notice)

    @property
    def latest(self) -> Optional[Notice]:
        return self.notices[-1] if self.notices else None

    def clear(self) -> None:
        self.notices.clear()


def error_message(error: BaseException) -> str:
    """Message text of an SDK error (postgrest and storage errors carry .message)."""
    message = getattr(error, "message", None)
    return str(message) if message else str(error)


def report_error(board: NoticeBoard, error: BaseException) -> None:
    """Log a Supabase failure and show it to the visitor as a destructive toast."""
    logger.error("Supabase error: %r", error)
    board.toast(
        Notice(variant="destructive", title="Error", description=error_message(error))
    )
