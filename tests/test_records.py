"""
Tests for session records and record stores.
"""

import json
from datetime import datetime, timedelta, timezone

import pytest

from gaprunner.gap_core.config_loader import GameMode
from gaprunner.gap_core.records import JsonRecordStore, MemoryRecordStore, RoundRecord

T0 = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def record_at(minutes, score=10, mode=GameMode.UNIFORM):
    return RoundRecord.create(score, mode, 75.9, completed_at=T0 + timedelta(minutes=minutes))


@pytest.fixture(params=["memory", "json"])
def store(request, tmp_path):
    if request.param == "memory":
        return MemoryRecordStore()
    return JsonRecordStore(tmp_path / "nested" / "records.json")


class TestRoundRecord:
    """Test the record value object."""

    def test_create(self):
        record = RoundRecord.create(40, "diverse", 75.9, completed_at=T0)
        assert record.mode is GameMode.DIVERSE
        assert record.duration_seconds == 75
        assert record.completed_at == T0
        assert len(record.id) == 32

    def test_unique_ids(self):
        assert record_at(0).id != record_at(0).id

    def test_negative_duration_clamped(self):
        assert RoundRecord.create(0, GameMode.UNIFORM, -2.0).duration_seconds == 0

    def test_default_timestamp_is_utc(self):
        record = RoundRecord.create(0, GameMode.UNIFORM, 1)
        assert record.completed_at.tzinfo is not None

    @pytest.mark.parametrize("seconds,text", [
        (0, "00:00"),
        (59, "00:59"),
        (75, "01:15"),
        (3600, "60:00"),
    ])
    def test_format_duration(self, seconds, text):
        record = RoundRecord.create(0, GameMode.UNIFORM, seconds, completed_at=T0)
        assert record.format_duration() == text

    def test_dict_round_trip(self):
        record = record_at(3, score=70, mode=GameMode.DIVERSE)
        data = record.to_dict()
        assert data["mode"] == "diverse"
        assert RoundRecord.from_dict(data) == record

    def test_naive_timestamp_read_as_utc(self):
        data = record_at(0).to_dict()
        data["completed_at"] = "2024-05-01T12:00:00"
        assert RoundRecord.from_dict(data).completed_at == T0

    def test_missing_field(self):
        data = record_at(0).to_dict()
        del data["score"]
        with pytest.raises(ValueError, match="Malformed record"):
            RoundRecord.from_dict(data)


class TestRecordStores:
    """Behaviour shared by the memory and JSON stores."""

    def test_empty(self, store):
        assert store.fetch_all() == []
        assert store.clear_all() == 0

    def test_newest_first(self, store):
        middle, oldest, newest = record_at(5), record_at(0), record_at(9)
        for record in (middle, oldest, newest):
            store.save(record)
        assert [r.id for r in store.fetch_all()] == [newest.id, middle.id, oldest.id]

    def test_delete(self, store):
        keep, drop = record_at(0), record_at(1)
        store.save(keep)
        store.save(drop)

        assert store.delete(drop.id)
        assert not store.delete(drop.id)
        assert store.fetch_all() == [keep]

    def test_clear_all(self, store):
        for minute in range(3):
            store.save(record_at(minute))
        assert store.clear_all() == 3
        assert store.fetch_all() == []


class TestJsonRecordStore:
    """JSON-specific behaviour."""

    def test_creates_parent_directories(self, tmp_path):
        path = tmp_path / "a" / "b" / "records.json"
        JsonRecordStore(path).save(record_at(0))
        assert path.exists()
        assert len(json.loads(path.read_text())) == 1

    def test_shared_file(self, tmp_path):
        path = tmp_path / "records.json"
        JsonRecordStore(path).save(record_at(0))
        JsonRecordStore(path).save(record_at(1))
        assert len(JsonRecordStore(path).fetch_all()) == 2

    def test_not_a_list(self, tmp_path):
        path = tmp_path / "records.json"
        path.write_text("{}")
        with pytest.raises(ValueError):
            JsonRecordStore(path).fetch_all()

    def test_malformed_entry(self, tmp_path):
        path = tmp_path / "records.json"
        path.write_text(json.dumps([{"id": "abc"}]))
        with pytest.raises(ValueError):
            JsonRecordStore(path).fetch_all()

    def test_clear_unreadable_file(self, tmp_path):
        path = tmp_path / "records.json"
        path.write_text("{not json")
        store = JsonRecordStore(path)

        assert store.clear_all() == 0
        assert store.fetch_all() == []

    def test_write_leaves_no_temp_file(self, tmp_path):
        path = tmp_path / "records.json"
        JsonRecordStore(path).save(record_at(0))
        assert [p.name for p in tmp_path.iterdir()] == ["records.json"]

    def test_utf8_on_disk(self, tmp_path):
        path = tmp_path / "records.json"
        JsonRecordStore(path).save(record_at(0))
        assert json.loads(path.read_bytes().decode("utf-8"))[0]["mode"] == "uniform"
