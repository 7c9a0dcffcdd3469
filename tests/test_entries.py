"""
Tests for the entry store mutation contract, listing, export and import.
"""
import json

import pytest

from lockbox.core.errors import EntryNotFoundError, VaultIOError
from lockbox.core.vault import EntryStore, ImportDocument
from lockbox.core.vault.entries import mask_value
from lockbox.utils.validators import ValidationError


class RecordingSave:
    """Save callback that remembers every snapshot it was given."""

    def __init__(self, fail=False):
        self.snapshots = []
        self.fail = fail

    def __call__(self, entries):
        if self.fail:
            raise VaultIOError("disk full")
        self.snapshots.append(entries)


@pytest.fixture
def saves():
    return RecordingSave()


@pytest.fixture
def store(saves):
    return EntryStore({"gmail": "oldpass"}, save=saves)


class TestAdd:

    def test_add_saves_full_set(self, store, saves):
        store.add("github", "token123")
        assert store.get("github") == "token123"
        assert saves.snapshots == [{"gmail": "oldpass", "github": "token123"}]

    def test_no_silent_overwrite(self, store, saves):
        with pytest.raises(ValidationError):
            store.add("gmail", "newpass")
        assert store.get("gmail") == "oldpass"
        assert saves.snapshots == []

    def test_empty_name_rejected(self, store, saves):
        with pytest.raises(ValidationError):
            store.add("", "somepass")
        assert "" not in store
        assert saves.snapshots == []

    def test_empty_value_rejected(self, store):
        with pytest.raises(ValidationError):
            store.add("somekey", "")
        assert "somekey" not in store

    def test_non_string_rejected(self, store):
        with pytest.raises(ValidationError):
            store.add("count", 42)

    def test_failed_save_rolls_back(self):
        store = EntryStore({"gmail": "oldpass"}, save=RecordingSave(fail=True))
        with pytest.raises(VaultIOError):
            store.add("github", "token123")
        assert "github" not in store
        assert len(store) == 1

    def test_store_without_save_callback(self):
        store = EntryStore()
        store.add("a", "1")
        assert store.snapshot() == {"a": "1"}


class TestRemoveAndGet:

    def test_remove_saves(self, store, saves):
        store.remove("gmail")
        assert "gmail" not in store
        assert saves.snapshots == [{}]

    def test_remove_missing(self, store, saves):
        with pytest.raises(EntryNotFoundError):
            store.remove("absent")
        assert saves.snapshots == []

    def test_failed_save_restores_entry(self):
        store = EntryStore({"gmail": "oldpass"}, save=RecordingSave(fail=True))
        with pytest.raises(VaultIOError):
            store.remove("gmail")
        assert store.get("gmail") == "oldpass"

    def test_get_missing(self, store):
        with pytest.raises(EntryNotFoundError) as excinfo:
            store.get("absent")
        assert "absent" in str(excinfo.value)

    def test_not_found_is_key_error(self, store):
        with pytest.raises(KeyError):
            store.get("absent")

    def test_get_has_no_side_effects(self, store, saves):
        store.get("gmail")
        assert saves.snapshots == []


class TestList:

    def test_masked_by_default(self, store):
        store.add("aws", "abc")
        assert store.list() == [("aws", "***"), ("gmail", "*******")]

    def test_masked_listing_leaks_no_characters(self, store):
        for _, shown in store.list():
            assert set(shown) == {"*"}

    def test_reveal(self, store):
        assert store.list(reveal=True) == [("gmail", "oldpass")]

    def test_mask_length_counts_characters(self):
        assert mask_value("pässwörd") == "********"

    def test_repr_hides_values(self, store):
        assert "oldpass" not in repr(store)

    def test_names_sorted(self):
        store = EntryStore({"b": "2", "a": "1"})
        assert store.names() == ["a", "b"]
        assert list(store) == ["a", "b"]


class TestExport:

    def test_export_fidelity(self, tmp_path):
        store = EntryStore({"email": "abc@example.com", "github": "token123"})
        target = tmp_path / "backup.json"
        store.export(target)
        assert json.loads(target.read_text(encoding="utf-8")) == {
            "email": "abc@example.com",
            "github": "token123",
        }

    def test_export_path_used_as_given(self, tmp_path):
        store = EntryStore({"a": "1"})
        store.export(tmp_path / "backup")
        assert (tmp_path / "backup").exists()
        assert not (tmp_path / "backup.json").exists()

    def test_export_unwritable(self, tmp_path):
        store = EntryStore({"a": "1"})
        target = tmp_path / "occupied"
        target.mkdir()
        with pytest.raises(VaultIOError):
            store.export(target)


class TestImport:

    def test_nested_value_rejected(self, store):
        report = store.import_json(b'{"key1": {"nested": "value"}}')
        assert isinstance(report.errors["key1"], ValidationError)
        assert "key1" not in store
        assert report.added == []

    def test_mixed_document(self, store, saves):
        report = store.import_json(json.dumps({
            "a": "1",
            "b": 2,
            "c": ["x"],
            "d": "4",
            "e": None,
        }))
        assert sorted(report.added) == ["a", "d"]
        assert sorted(report.errors) == ["b", "c", "e"]
        assert store.get("a") == "1"
        assert store.get("d") == "4"
        assert len(saves.snapshots) == 2

    def test_duplicate_does_not_abort_batch(self, store):
        report = store.import_json(b'{"gmail": "newpass", "new": "value"}')
        assert report.added == ["new"]
        assert isinstance(report.errors["gmail"], ValidationError)
        assert store.get("gmail") == "oldpass"
        assert not report.ok

    def test_empty_name_reported(self, store):
        report = store.import_json(b'{"": "value", "ok": "yes"}')
        assert "" in report.errors
        assert report.added == ["ok"]

    def test_clean_import(self):
        store = EntryStore()
        report = store.import_json(b'{"x": "1", "y": "2"}')
        assert report.ok
        assert store.snapshot() == {"x": "1", "y": "2"}

    @pytest.mark.parametrize("data", [b"{not json", b'["a", "b"]', b'"text"', b"\xff"])
    def test_malformed_document(self, store, data):
        with pytest.raises(ValidationError):
            store.import_json(data)

    def test_import_file(self, store, tmp_path):
        source = tmp_path / "in.json"
        source.write_text('{"aws": "key"}', encoding="utf-8")
        store.import_file(source)
        assert store.get("aws") == "key"

    def test_import_missing_file(self, store, tmp_path):
        with pytest.raises(VaultIOError):
            store.import_file(tmp_path / "absent.json")

    def test_export_import_round_trip(self, tmp_path):
        source = EntryStore({"email": "abc@example.com", "github": "token123"})
        target = tmp_path / "backup.json"
        source.export(target)

        restored = EntryStore()
        restored.import_file(target)
        assert restored.snapshot() == source.snapshot()


class TestImportDocument:

    def test_parse_splits_valid_and_rejected(self):
        document = ImportDocument.parse('{"a": "1", "b": true}')
        assert document.entries == {"a": "1"}
        assert list(document.rejected) == ["b"]
