import json
from pathlib import Path

import pytest
import streamlit as st
from streamlit.testing.v1 import AppTest

from coffee_guide.config import get_settings

APP_PATH = Path(__file__).resolve().parent.parent / "app" / "main.py"


@pytest.fixture
def presets_file(tmp_path, monkeypatch):
    monkeypatch.setenv("COFFEE_GUIDE_DATA_DIR", str(tmp_path))
    get_settings.cache_clear()
    st.cache_resource.clear()
    yield tmp_path / "presets.json"
    get_settings.cache_clear()
    st.cache_resource.clear()


def _open(preset_id: str) -> AppTest:
    at = AppTest.from_file(str(APP_PATH), default_timeout=30)
    at.session_state["view"] = "calculator"
    at.session_state["active_id"] = preset_id
    return at.run()


def _stored(path: Path, preset_id: str) -> dict:
    return next(r for r in json.loads(path.read_text(encoding="utf-8")) if r["id"] == preset_id)


def test_menu_renders_every_category(presets_file):
    at = AppTest.from_file(str(APP_PATH), default_timeout=30).run()
    assert not at.exception
    assert len(at.expander) >= 6


def test_unknown_moka_size_is_shown_not_replaced(presets_file):
    presets_file.write_text(json.dumps([
        {"id": "m1", "name": "Old moka", "brew_method": "Moka Italiana", "moka_size": "12 Tazas"},
    ]), encoding="utf-8")

    at = _open("m1")

    assert not at.exception
    assert any("12 Tazas" in w.value for w in at.warning)
    assert at.selectbox(key="moka-m1").value is None
    assert _stored(presets_file, "m1")["moka_size"] == "12 Tazas"


def test_opening_preset_keeps_fractional_and_out_of_range_values(presets_file):
    presets_file.write_text(json.dumps([
        {"id": "e1", "name": "Half gram", "brew_method": "Espresso", "coffee_dose": 18.5},
        {"id": "e2", "name": "Huge", "brew_method": "Espresso", "coffee_dose": 35, "tasting_result": None},
    ]), encoding="utf-8")

    at = _open("e1")
    assert not at.exception
    assert at.slider(key="dose-e1").value == 18.5
    assert _stored(presets_file, "e1")["coffee_dose"] == 18.5

    at = _open("e2")
    assert not at.exception
    assert at.slider(key="dose-e2").value == 30.0
    assert _stored(presets_file, "e2")["coffee_dose"] == 35
    assert _stored(presets_file, "e2")["tasting_result"] is None


def test_moving_the_dose_slider_writes_it(presets_file):
    presets_file.write_text(json.dumps([
        {"id": "e1", "name": "Shot", "brew_method": "Espresso", "coffee_dose": 18},
    ]), encoding="utf-8")

    at = _open("e1")
    at.slider(key="dose-e1").set_value(20.5).run()

    assert not at.exception
    assert _stored(presets_file, "e1")["coffee_dose"] == 20.5
