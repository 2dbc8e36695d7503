import json
import logging

from coffee_guide.catalog import ESPRESSO, MOKA, V60, TastingResult
from coffee_guide.presets import PresetStore, SetName, SetTastingResult, SetWaterAmount
from coffee_guide.storage import JsonPresetSlot


def test_missing_file_loads_empty(tmp_path):
    assert JsonPresetSlot(tmp_path / "presets.json").load() == []


def test_corrupt_file_loads_empty(tmp_path, caplog):
    path = tmp_path / "presets.json"
    path.write_text("{not json", encoding="utf-8")

    with caplog.at_level(logging.WARNING, logger="coffee_guide"):
        assert JsonPresetSlot(path).load() == []
    assert "could not read" in caplog.text


def test_non_list_payload_loads_empty(tmp_path):
    path = tmp_path / "presets.json"
    path.write_text(json.dumps({"presets": []}), encoding="utf-8")
    assert JsonPresetSlot(path).load() == []


def test_presets_survive_a_restart(tmp_path):
    path = tmp_path / "data" / "presets.json"

    store = PresetStore.open(JsonPresetSlot(path))
    espresso = store.create(ESPRESSO)
    v60 = store.create(V60)
    store.update(espresso.id, SetName("Morning shot"))
    store.update(espresso.id, SetTastingResult(TastingResult.ACIDIC))
    store.update(v60.id, SetWaterAmount(320))

    reopened = PresetStore.open(JsonPresetSlot(path))

    assert reopened.list() == store.list()
    assert reopened.get(espresso.id).name == "Morning shot"
    assert reopened.get(v60.id).water_amount == 320


def test_file_is_a_plain_list_of_records(tmp_path):
    path = tmp_path / "presets.json"
    store = PresetStore.open(JsonPresetSlot(path))
    preset = store.create(MOKA)

    data = json.loads(path.read_text(encoding="utf-8"))

    assert isinstance(data, list)
    assert data[0]["id"] == preset.id
    assert data[0]["brew_method"] == MOKA
    assert data[0]["tasting_result"] == "Balanced"


def test_bad_and_duplicate_records_are_skipped(tmp_path, caplog):
    path = tmp_path / "presets.json"
    path.write_text(json.dumps([
        {"id": "a", "brew_method": V60, "name": "Keep"},
        {"id": "b", "brew_method": "Siphon"},
        {"id": "a", "brew_method": ESPRESSO, "name": "Duplicate"},
        "garbage",
    ]), encoding="utf-8")

    with caplog.at_level(logging.WARNING, logger="coffee_guide"):
        presets = JsonPresetSlot(path).load()

    assert [p.name for p in presets] == ["Keep"]
    assert "duplicate preset id a" in caplog.text


def test_failed_write_is_logged_and_store_keeps_state(tmp_path, caplog):
    # the target path is a directory, so the final replace fails
    path = tmp_path / "presets.json"
    path.mkdir()
    (path / "occupied").write_text("x", encoding="utf-8")
    slot = JsonPresetSlot(path)

    with caplog.at_level(logging.ERROR, logger="coffee_guide"):
        assert slot.write([]) is False
        store = PresetStore(slot)
        preset = store.create(V60)

    assert store.get(preset.id) is not None
    assert "failed to save presets" in caplog.text
