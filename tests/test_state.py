"""
Unit tests for the state file module.
"""

import json
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from azresources.state import (
    STATE_VERSION,
    StateFileError,
    empty_state,
    get_resource,
    load_state,
    put_resource,
    remove_resource,
    save_state,
)

ADDRESS = "azurerm_data_lake_analytics_account.example"


class TestLoadSave:
    """Tests for load_state() and save_state()."""

    def test_missing_file_is_empty(self, tmp_path):
        assert load_state(str(tmp_path / "state.json")) == empty_state()

    def test_save_then_load(self, tmp_path):
        path = str(tmp_path / "state.json")
        doc = empty_state()
        put_resource(doc, ADDRESS, {"id": "/subscriptions/s/resourceGroups/rg", "tier": "Consumption"})

        save_state(path, doc)

        assert load_state(path) == doc

    def test_failed_write_keeps_previous_file(self, tmp_path):
        path = str(tmp_path / "state.json")
        doc = empty_state()
        put_resource(doc, ADDRESS, {"id": "abc", "tier": "Consumption"})
        save_state(path, doc)

        broken = empty_state()
        broken["resources"][ADDRESS] = {"id": "abc", "attributes": {"tier": object()}}
        with pytest.raises(TypeError):
            save_state(path, broken)

        assert load_state(path) == doc
        assert [p.name for p in tmp_path.iterdir()] == ["state.json"]

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "state.json"
        path.write_text("{not json")

        with pytest.raises(StateFileError) as exc_info:
            load_state(str(path))

        assert "Could not read state file" in str(exc_info.value)

    def test_unsupported_version(self, tmp_path):
        path = tmp_path / "state.json"
        path.write_text(json.dumps({"version": STATE_VERSION + 1, "resources": {}}))

        with pytest.raises(StateFileError) as exc_info:
            load_state(str(path))

        assert exc_info.value.context["version"] == STATE_VERSION + 1


class TestResources:
    """Tests for get_resource(), put_resource() and remove_resource()."""

    def test_flat_state(self):
        doc = empty_state()
        put_resource(doc, ADDRESS, {"id": "abc", "tier": "Consumption"})

        assert doc["resources"][ADDRESS] == {"id": "abc", "attributes": {"tier": "Consumption"}}
        assert get_resource(doc, ADDRESS) == {"id": "abc", "tier": "Consumption"}

    def test_unknown_address(self):
        assert get_resource(empty_state(), ADDRESS) is None

    def test_empty_id_removes(self):
        doc = empty_state()
        put_resource(doc, ADDRESS, {"id": "abc"})
        put_resource(doc, ADDRESS, {"id": "", "tier": "Consumption"})

        assert ADDRESS not in doc["resources"]

    def test_remove_missing_is_noop(self):
        doc = empty_state()
        remove_resource(doc, ADDRESS)
        assert doc["resources"] == {}
