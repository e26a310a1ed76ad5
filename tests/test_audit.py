"""Tests for audit logging module."""

import json
import threading
from datetime import datetime
from pathlib import Path

from platformdirs import user_data_dir

from cmdblocker.integrations import audit as audit_module
from cmdblocker.integrations.audit import (
    AuditContext,
    AuditEvent,
    AuditLogger,
    get_audit_logger,
    get_null_device,
)


class TestAuditEvent:
    """Test AuditEvent dataclass."""

    def test_to_json(self):
        """Events serialize to a single JSON object."""
        event = AuditEvent(
            timestamp="2026-10-19T10:00:00+00:00",
            event_type="block",
            command="plugins",
            permission="cmdblock.bypass",
            context={"sender": "Steve"},
        )
        data = json.loads(event.to_json())
        assert data["event_type"] == "block"
        assert data["command"] == "plugins"
        assert data["context"] == {"sender": "Steve"}


class TestAuditLogger:
    """Test AuditLogger file output."""

    def test_log_decision(self, tmp_path):
        """Decisions are appended as JSON lines."""
        log_file = tmp_path / "audit.jsonl"
        audit = AuditLogger(log_file=log_file)
        audit.log_decision("plugins", "block", "cmdblock.bypass", AuditContext(sender="Steve", platform="spigot"))
        audit.log_decision("version", "bypass", "cmdblock.bypass")

        lines = [json.loads(line) for line in log_file.read_text().splitlines()]
        assert [line["command"] for line in lines] == ["plugins", "version"]
        assert lines[0]["context"] == {"sender": "Steve", "server": None, "platform": "spigot"}
        assert lines[1]["event_type"] == "bypass"
        assert datetime.fromisoformat(lines[0]["timestamp"]).tzinfo is not None

    def test_creates_parent_directory(self, tmp_path):
        """Missing log directories are created."""
        log_file = tmp_path / "nested" / "dir" / "audit.jsonl"
        AuditLogger(log_file=log_file).log_decision("me", "block", "cmdblock.bypass")
        assert log_file.exists()

    def test_write_failure_is_silent(self, tmp_path):
        """Unwritable log paths never raise."""
        audit = AuditLogger(log_file=tmp_path)  # a directory, not a file
        audit.log_decision("me", "block", "cmdblock.bypass")

    def test_env_override_file(self, tmp_path, monkeypatch):
        """CMDBLOCKER_AUDIT_LOG ending in .jsonl is used as-is."""
        target = tmp_path / "custom.jsonl"
        monkeypatch.setenv("CMDBLOCKER_AUDIT_LOG", str(target))
        assert AuditLogger().log_file == target

    def test_env_override_directory(self, tmp_path, monkeypatch):
        """CMDBLOCKER_AUDIT_LOG pointing at a directory gets a dated file."""
        monkeypatch.setenv("CMDBLOCKER_AUDIT_LOG", str(tmp_path))
        today = datetime.now().strftime("%Y-%m-%d")
        assert AuditLogger().log_file == tmp_path / f"audit-{today}.jsonl"

    def test_env_override_null_device(self, monkeypatch):
        """The null device is accepted as a file."""
        monkeypatch.setenv("CMDBLOCKER_AUDIT_LOG", get_null_device())
        assert str(AuditLogger().log_file) == get_null_device()

    def test_default_location(self, monkeypatch):
        """Without override, logs go to the platform data directory."""
        monkeypatch.delenv("CMDBLOCKER_AUDIT_LOG", raising=False)
        audit = AuditLogger.__new__(AuditLogger)
        path = audit._get_default_log_path()
        assert path.parent == Path(user_data_dir("cmdblocker", "cmdblocker"))
        assert path.name.startswith("audit-")


class TestAuditSingleton:
    """Test get_audit_logger singleton."""

    def test_singleton_thread_safe(self, tmp_path, monkeypatch):
        """Concurrent callers get the same instance."""
        monkeypatch.setenv("CMDBLOCKER_AUDIT_LOG", str(tmp_path / "audit.jsonl"))
        monkeypatch.setattr(audit_module, "_audit_logger", None)
        results = []

        def worker():
            results.append(get_audit_logger())

        threads = [threading.Thread(target=worker) for _ in range(10)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len({id(r) for r in results}) == 1
