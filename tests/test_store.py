"""
Tests for reset record persistence.
"""

from datetime import datetime, timedelta, timezone

import pytest

from upt.exceptions import HomeResolutionError, PersistedReadError, PersistedWriteError
from upt.models.domain import PersistedReset, parse_rfc3339
from upt.services.store import ResetStore

REFERENCE = datetime.fromtimestamp(1685871491, tz=timezone.utc)


class TestParsing:
    """Tests for the on-disk timestamp format."""

    def test_parse_nanosecond_timestamp(self):
        """Timestamps with nanosecond fractions should parse."""
        parsed = parse_rfc3339("2023-06-04T09:38:11.000000000+00:00")
        assert parsed == REFERENCE

    def test_parse_ignores_surrounding_whitespace(self):
        """Trailing newlines should not break parsing."""
        assert parse_rfc3339("2023-06-04T09:38:11.000000000+00:00\n") == REFERENCE
        assert parse_rfc3339("  2023-06-04T09:38:11+00:00  ") == REFERENCE

    def test_parse_normalizes_offset(self):
        """Non-UTC offsets should be normalized to UTC."""
        parsed = parse_rfc3339("2023-06-04T11:38:11+02:00")
        assert parsed == REFERENCE
        assert parsed.utcoffset() == timedelta(0)

    def test_parse_zulu(self):
        """A Z suffix means UTC."""
        assert parse_rfc3339("2023-06-04T09:38:11Z") == REFERENCE

    @pytest.mark.parametrize(
        "text",
        [
            "2030604T09:xy:11.000000000+00:00",
            "2023-13-04T09:38:11+00:00",
            "2023-02-30T09:38:11+00:00",
            "2023-06-04T25:38:11+00:00",
            "2023-06-04T09:38:11",
            "2023-06-04T09:38:11+99:00",
            "",
            "yesterday",
        ],
    )
    def test_parse_rejects_malformed(self, text):
        """Malformed timestamps should raise PersistedReadError."""
        with pytest.raises(PersistedReadError):
            parse_rfc3339(text)

    def test_round_trip_keeps_microseconds(self):
        """Serializing and parsing should yield the same instant."""
        instant = datetime(2024, 2, 29, 23, 59, 59, 123456, tzinfo=timezone.utc)
        text = PersistedReset(instant=instant).to_text()

        assert text == "2024-02-29T23:59:59.123456+00:00"
        assert PersistedReset.from_text(text + "\n").instant == instant

    def test_round_trip_from_local_offset(self):
        """Instants with other offsets round-trip to the same UTC instant."""
        tz = timezone(timedelta(hours=-7, minutes=-30))
        instant = datetime(2024, 5, 1, 8, 15, 0, 5, tzinfo=tz)

        restored = PersistedReset.from_text(PersistedReset(instant=instant).to_text())
        assert restored.instant == instant
        assert restored.instant.tzinfo == timezone.utc


class TestResetStore:
    """Tests for ResetStore."""

    def test_read_missing_file(self, store):
        """A missing record means no reset."""
        assert store.read() is None

    def test_read_without_location(self):
        """An unresolved location means no reset."""
        assert ResetStore(None).read() is None

    def test_read_corrupt_file(self, store, reset_path):
        """A corrupt record means no reset."""
        reset_path.write_text("2023-06-04T09:xy:11+00:00")
        assert store.read() is None

    def test_read_binary_garbage(self, store, reset_path):
        """Undecodable content means no reset."""
        reset_path.write_bytes(b"\xff\xfe\x00garbage")
        assert store.read() is None

    def test_read_directory(self, store, reset_path):
        """An unreadable record means no reset."""
        reset_path.mkdir()
        assert store.read() is None

    def test_load_raises_on_missing(self, store):
        """load() reports the underlying read failure."""
        with pytest.raises(PersistedReadError):
            store.load()

    def test_write_then_read(self, store, reset_path):
        """A written instant should be read back unchanged."""
        instant = datetime(2024, 1, 1, 10, 0, 0, 250000, tzinfo=timezone.utc)
        store.write(instant)

        assert reset_path.read_text() == "2024-01-01T10:00:00.250000+00:00"
        assert store.read() == instant

    def test_write_overwrites(self, store, reset_path):
        """A new reset replaces the old record entirely."""
        store.write(datetime(2024, 1, 1, tzinfo=timezone.utc))
        store.write(datetime(2024, 1, 2, tzinfo=timezone.utc))

        assert store.read() == datetime(2024, 1, 2, tzinfo=timezone.utc)
        assert reset_path.read_text().count("+00:00") == 1

    def test_write_leaves_no_temporary_files(self, store, reset_path):
        """Only the record itself should remain after a write."""
        store.write(datetime(2024, 1, 1, tzinfo=timezone.utc))
        assert [p.name for p in reset_path.parent.iterdir()] == [".upt"]

    def test_write_creates_parent_directory(self, tmp_path):
        """A configured location in a new directory should be created."""
        store = ResetStore(tmp_path / "state" / "upt" / "reset")
        store.write(datetime(2024, 1, 1, tzinfo=timezone.utc))
        assert store.read() == datetime(2024, 1, 1, tzinfo=timezone.utc)

    def test_write_failure(self, tmp_path):
        """An unwritable location should raise PersistedWriteError."""
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("")
        store = ResetStore(blocker / ".upt")

        with pytest.raises(PersistedWriteError):
            store.write(datetime(2024, 1, 1, tzinfo=timezone.utc))

    def test_write_without_location(self):
        """Writing needs a resolved location."""
        with pytest.raises(HomeResolutionError):
            ResetStore(None).write(datetime(2024, 1, 1, tzinfo=timezone.utc))
