"""
Tests for persistence — atomic JSON writes and the audit ledger.
"""

import json
from pathlib import Path

import pytest

from cordova_sync.core.errors import ConfigError, PersistenceError
from cordova_sync.core.persistence.audit import AuditEntry, AuditWriter
from cordova_sync.core.persistence.json_file import read_json, write_json_atomic


class TestJsonFile:
    def test_write_and_read(self, tmp_path: Path):
        path = tmp_path / "nested" / "data.json"
        write_json_atomic(path, {"a": [1, 2]})
        assert read_json(path) == {"a": [1, 2]}
        assert path.read_text().endswith("\n")

    def test_no_temp_files_left(self, tmp_path: Path):
        write_json_atomic(tmp_path / "data.json", {})
        assert [p.name for p in tmp_path.iterdir()] == ["data.json"]

    def test_missing_returns_default(self, tmp_path: Path):
        assert read_json(tmp_path / "nope.json", default={"x": 1}) == {"x": 1}

    def test_corrupt_raises(self, tmp_path: Path):
        path = tmp_path / "bad.json"
        path.write_text("{")
        with pytest.raises(ConfigError):
            read_json(path)

    def test_unwritable_raises(self, tmp_path: Path):
        blocker = tmp_path / "file"
        blocker.write_text("")
        with pytest.raises(PersistenceError):
            write_json_atomic(blocker / "data.json", {})


class TestAuditWriter:
    def test_write_and_read(self, tmp_path: Path):
        writer = AuditWriter(project_root=tmp_path)
        writer.write(AuditEntry(operation_id="op-1", operation_type="platform_rm", status="ok"))
        writer.write(AuditEntry(operation_id="op-2", operation_type="plugin_rm", status="failed"))

        assert writer.path == tmp_path / ".cordova-sync" / "audit.ndjson"
        entries = writer.read_all()
        assert [e.operation_id for e in entries] == ["op-1", "op-2"]

    def test_ndjson_format(self, tmp_path: Path):
        writer = AuditWriter(path=tmp_path / "audit.ndjson")
        writer.write(AuditEntry(operation_id="op-1"))
        lines = (tmp_path / "audit.ndjson").read_text().splitlines()
        assert json.loads(lines[0])["operation_id"] == "op-1"

    def test_read_missing(self, tmp_path: Path):
        assert AuditWriter(project_root=tmp_path).read_all() == []
