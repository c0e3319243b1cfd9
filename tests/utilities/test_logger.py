"""
Unit tests for the structured logging helpers.
"""

import logging

import pytest
import structlog
from fastapi.testclient import TestClient
from structlog.testing import capture_logs

from api.main import create_app
from catalog.store import BookStore, UserStore
from utilities.logger import AuditLogger, setup_logging


@pytest.fixture
def root_handlers():
    """Restore the root logger handlers and structlog config after a test."""
    root = logging.getLogger()
    handlers_before = list(root.handlers)
    yield root
    for handler in list(root.handlers):
        if handler not in handlers_before:
            root.removeHandler(handler)
            handler.close()
    structlog.reset_defaults()


def _file_handlers(root, log_file):
    target = str(log_file.resolve())
    return [
        h for h in root.handlers
        if isinstance(h, logging.FileHandler) and h.baseFilename == target
    ]


def test_setup_logging_with_file(tmp_path, root_handlers):
    log_file = tmp_path / "nested" / "api.log"

    setup_logging(log_level="INFO", log_format="json", log_file=log_file)

    assert log_file.parent.exists()
    assert len(_file_handlers(root_handlers, log_file)) == 1


def test_setup_logging_attaches_file_once(tmp_path, root_handlers):
    log_file = tmp_path / "api.log"

    setup_logging(log_file=log_file)
    setup_logging(log_file=str(log_file))

    assert len(_file_handlers(root_handlers, log_file)) == 1


def test_repeated_app_starts_share_one_file_handler(tmp_path, root_handlers, app_config, api_config):
    """Test that starting several apps does not stack file handlers."""
    log_file = tmp_path / "api.log"
    config = app_config.model_copy(update={"log_file": str(log_file)})

    for _ in range(3):
        app = create_app(
            app_config=config,
            api_config=api_config,
            book_store=BookStore(),
            user_store=UserStore(password_hash_iterations=config.password_hash_iterations),
        )
        with TestClient(app) as client:
            assert client.get("/health").status_code == 200

    assert len(_file_handlers(root_handlers, log_file)) == 1


def test_audit_logger_binds_context():
    with capture_logs() as logs:
        audit = AuditLogger("test.audit").bind_context(username="alice", isbn="1")
        audit.log_review_saved(created=True)
        audit.bind_context(username="bob").log_login(success=False)

    assert logs[0]["event"] == "Review saved"
    assert logs[0]["action"] == "created"
    assert logs[0]["username"] == "alice"
    assert logs[0]["isbn"] == "1"
    assert logs[1]["log_level"] == "warning"
    assert logs[1]["username"] == "bob"
    assert logs[1]["success"] is False


def test_bound_context_does_not_leak():
    """Test that binding returns a new logger and leaves the original untouched."""
    with capture_logs() as logs:
        base = AuditLogger("test.audit")
        base.bind_context(username="alice", isbn="1")
        base.log_review_deleted()

    assert logs[0]["event"] == "Review deleted"
    assert "username" not in logs[0]
    assert "isbn" not in logs[0]


def test_review_routes_log_bound_context(client, login, monkeypatch):
    """Test that review events carry the caller and the book."""
    headers = login("alice")

    with capture_logs() as logs:
        monkeypatch.setattr("api.routes.audit", AuditLogger("api.routes"))
        client.put("/customer/auth/review/1", params={"review": "Classic"}, headers=headers)
        client.delete("/customer/auth/review/1", headers=headers)

    events = {entry["event"]: entry for entry in logs}
    assert events["Review saved"]["username"] == "alice"
    assert events["Review saved"]["isbn"] == "1"
    assert events["Review deleted"]["username"] == "alice"
