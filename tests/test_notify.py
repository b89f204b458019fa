import io
import logging

from rich.console import Console

from storefront import notify
from storefront.models import NotificationKind
from storefront.notify import ConsoleNotifier, LogNotifier


def test_console_notifier_prints_messages():
    out = io.StringIO()
    n = ConsoleNotifier(Console(file=out, force_terminal=False))
    assert n.notify(NotificationKind.SUCCESS, "Product created") is None
    assert "Product created" in out.getvalue()


def test_console_notifier_confirm(monkeypatch):
    monkeypatch.setattr(notify.Confirm, "ask", classmethod(lambda cls, *a, **kw: True))
    n = ConsoleNotifier(Console(file=io.StringIO()))
    assert n.notify(NotificationKind.CONFIRM, "Delete Sedan X?") is True


def test_log_notifier(caplog):
    n = LogNotifier(auto_confirm=False)
    with caplog.at_level(logging.INFO, logger="storefront.notify"):
        assert n.notify(NotificationKind.CONFIRM, "Delete?") is False
        n.notify(NotificationKind.WARNING, "Insufficient stock")
    assert any(r.levelno == logging.WARNING and "Insufficient stock" in r.getMessage() for r in caplog.records)
