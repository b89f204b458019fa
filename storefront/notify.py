# storefront/notify.py
import logging
from typing import Optional, Protocol

from rich.console import Console
from rich.prompt import Confirm

from .models import NotificationKind

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    def notify(self, kind: NotificationKind, message: str) -> Optional[bool]: ...


_STYLES = {
    NotificationKind.SUCCESS: "bold green",
    NotificationKind.ERROR: "bold red",
    NotificationKind.WARNING: "yellow",
}


class ConsoleNotifier:
    """Interactive sink: prints with rich, asks confirmations on the terminal."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def notify(self, kind: NotificationKind, message: str) -> Optional[bool]:
        if kind == NotificationKind.CONFIRM:
            return Confirm.ask(message, console=self.console, default=False)
        self.console.print(f"[{_STYLES[kind]}]{message}[/{_STYLES[kind]}]")
        return None


class LogNotifier:
    """Headless sink used by the API server; confirmations use a fixed answer."""

    def __init__(self, auto_confirm: bool = True):
        self.auto_confirm = auto_confirm

    def notify(self, kind: NotificationKind, message: str) -> Optional[bool]:
        if kind == NotificationKind.CONFIRM:
            logger.info("confirm %r -> %s", message, self.auto_confirm)
            return self.auto_confirm
        level = logging.WARNING if kind in (NotificationKind.ERROR, NotificationKind.WARNING) else logging.INFO
        logger.log(level, "[%s] %s", kind.value, message)
        return None
