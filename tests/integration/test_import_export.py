import json

import pytest

from core.menu.schema import MenuValidationError
from storage.import_export import EXPORT_FORMAT, ImportExportManager

pytestmark = [pytest.mark.integration]


def test_export_without_menu(store, tmp_path) -> None:
    with pytest.raises(ValueError):
        ImportExportManager(store, str(tmp_path)).export_menu()


def test_export_envelope(store, sample_items, tmp_path) -> None:
    document = store.create_menu(sample_items)[0]
    data = ImportExportManager(store, str(tmp_path)).export_menu()

    assert data["format"] == EXPORT_FORMAT
    assert data["version"] == "1.0"
    assert data["menu"] == {"id": document["id"], "items": sample_items}
    assert data["metadata"]["item_count"] == 6


def test_import_creates_then_overwrites(store, sample_items, tmp_path) -> None:
    manager = ImportExportManager(store, str(tmp_path))
    first = manager.import_menu({"menu": {"items": sample_items}})
    second = manager.import_menu({"menu": {"items": sample_items[:1]}})

    assert second["id"] == first["id"]
    assert store.get_menu()["items"] == sample_items[:1]


def test_import_rejects_bad_data(store, tmp_path) -> None:
    manager = ImportExportManager(store, str(tmp_path))
    with pytest.raises(ValueError):
        manager.import_menu({"items": []})
    with pytest.raises(ValueError, match="must be an object"):
        manager.import_menu({"menu": ["x"]})
    with pytest.raises(MenuValidationError):
        manager.import_menu({"menu": {"items": [{"id": "x"}]}})
    assert store.get_menu() is None


def test_file_round_trip_and_listing(store, sample_items, tmp_path) -> None:
    store.create_menu(sample_items)
    manager = ImportExportManager(store, str(tmp_path))
    path = tmp_path / "menu.json"
    manager.export_to_file(str(path))
    (tmp_path / "other.json").write_text(json.dumps({"format": "something-else"}))
    (tmp_path / "broken.json").write_text("{")

    listed = manager.list_exported_menus()
    assert [entry["path"] for entry in listed] == [str(path)]
    assert listed[0]["item_count"] == 6

    document = manager.import_from_file(str(path))
    assert document["items"] == sample_items
