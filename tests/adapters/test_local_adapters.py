from __future__ import annotations

import io
import logging

import pytest

from liftlog.adapters.identity import StaticIdentityProvider
from liftlog.adapters.notifications import ConsoleNotifier, LoggingNotifier
from liftlog.config import MissingConfigurationError
from liftlog.domain.ports import IdentityProvider, Notifier


def test_console_notifier_writes_prefixed_lines() -> None:
    stream = io.StringIO()
    notifier = ConsoleNotifier(stream)

    notifier.notify("Started session on Lat Pulldown")

    assert stream.getvalue() == "> Started session on Lat Pulldown\n"
    assert isinstance(notifier, Notifier)


def test_logging_notifier_logs_at_info(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.INFO, logger="liftlog.adapters.notifications"):
        LoggingNotifier().notify("Session timed out")

    assert "Notification: Session timed out" in caplog.text


def test_identity_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LIFTLOG_USER_ID", "user-9")

    identity = StaticIdentityProvider.from_env()

    assert identity.user_id == "user-9"
    assert isinstance(identity, IdentityProvider)


def test_identity_from_env_requires_user(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("LIFTLOG_USER_ID", raising=False)

    with pytest.raises(MissingConfigurationError):
        StaticIdentityProvider.from_env()
