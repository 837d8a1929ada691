"""Tests for saving and loading scratch settings."""

import json
from pathlib import Path

import pytest

from scratch_organizer.domain.value_objects import AppendType, DefaultScratchMeaning, Scratch
from scratch_organizer.exceptions import ConfigurationError
from scratch_organizer.models.config import (
    DEFAULT_CONFIG,
    ScratchConfigPersistence,
    config_to_dict,
    load_config,
    load_settings,
    save_config,
)
from scratch_organizer.models.config_schema import validate_settings_json


@pytest.fixture
def settings_path(tmp_path):
    return tmp_path / "settings" / "settings.json"


class TestSaveAndLoad:
    """Test save_config and load_config."""

    def test_missing_file_gives_defaults(self, settings_path):
        assert load_config(settings_path) == DEFAULT_CONFIG

    def test_saved_config_is_loaded_back(self, settings_path, tmp_path):
        config = (
            DEFAULT_CONFIG
            .with_scratches([Scratch.create("&a.txt"), Scratch.create("b.txt")])
            .with_last_opened_scratch(Scratch.create("b.txt"))
            .with_listen_to_clipboard(True)
            .with_needs_migration(False)
            .with_clipboard_append_type(AppendType.PREPEND)
            .with_new_scratch_append_type(AppendType.PREPEND)
            .with_default_scratch_meaning(DefaultScratchMeaning.LAST_OPENED)
        )

        save_config(config, settings_path, tmp_path / "scratches")
        loaded, folder = load_settings(settings_path)

        assert loaded == config
        assert folder == tmp_path / "scratches"

    def test_file_content(self, settings_path):
        save_config(DEFAULT_CONFIG.with_scratches([Scratch.create("a.txt")]), settings_path)
        data = json.loads(settings_path.read_text(encoding="utf-8"))

        assert data["scratches"] == ["a.txt"]
        assert data["scratches_folder_path"] is None
        assert data["clipboard_append_type"] == "APPEND"
        assert data["default_scratch_meaning"] == "TOPMOST"

    def test_absent_policies_keep_defaults(self, settings_path):
        settings_path.parent.mkdir(parents=True)
        settings_path.write_text(json.dumps({"scratches": ["a.txt"], "clipboard_append_type": None}))

        config = load_config(settings_path)

        assert config.scratches == (Scratch.create("a.txt"),)
        assert config.clipboard_append_type is AppendType.APPEND
        assert config.need_migration is True

    def test_repeated_names_are_rejected(self, settings_path):
        settings_path.parent.mkdir(parents=True)
        settings_path.write_text(json.dumps({"scratches": ["a.txt", "a.txt", "&a.txt"]}))

        with pytest.raises(ConfigurationError, match="Invalid settings"):
            load_config(settings_path)

    def test_names_for_the_same_file_are_loaded_once(self, settings_path):
        settings_path.parent.mkdir(parents=True)
        settings_path.write_text(json.dumps({"scratches": ["&a.txt", "b.txt", "a.txt"]}))

        config = load_config(settings_path)

        assert config.scratches == (Scratch.create("&a.txt"), Scratch.create("b.txt"))

    def test_invalid_json(self, settings_path):
        settings_path.parent.mkdir(parents=True)
        settings_path.write_text("{not json")

        with pytest.raises(ConfigurationError, match="Cannot parse"):
            load_config(settings_path)

    def test_invalid_document(self, settings_path):
        settings_path.parent.mkdir(parents=True)
        settings_path.write_text(json.dumps({"clipboard_append_type": "SIDEWAYS"}))

        with pytest.raises(ConfigurationError, match="Invalid settings"):
            load_config(settings_path)


class TestSchema:
    """Test settings schema validation."""

    def test_serialized_config_is_valid(self):
        assert validate_settings_json(config_to_dict(DEFAULT_CONFIG)) == []

    def test_unknown_key(self):
        errors = validate_settings_json({"colour": "blue"})
        assert len(errors) == 1
        assert "colour" in errors[0]

    def test_error_path(self):
        errors = validate_settings_json({"scratches": ["a.txt", 42]})
        assert errors[0].startswith("Validation error at scratches -> 1")


class TestScratchConfigPersistence:
    """Test ScratchConfigPersistence."""

    def test_persist_and_load(self, settings_path):
        persistence = ScratchConfigPersistence(settings_path)
        config = DEFAULT_CONFIG.with_scratches([Scratch.create("a.txt")])

        persistence.persist(config)

        assert ScratchConfigPersistence(settings_path).load() == config

    def test_update_scratches_folder(self, settings_path, tmp_path):
        persistence = ScratchConfigPersistence(settings_path)
        persistence.update_scratches_folder(tmp_path / "elsewhere", DEFAULT_CONFIG)

        reloaded = ScratchConfigPersistence(settings_path)
        reloaded.load()
        assert reloaded.scratches_folder == tmp_path / "elsewhere"

    def test_default_location(self, tmp_path, monkeypatch):
        monkeypatch.setenv("SCRATCH_ORGANIZER_HOME", str(tmp_path))
        assert ScratchConfigPersistence().settings_path == Path(tmp_path) / "settings.json"

    def test_try_load_reports_broken_file(self, settings_path):
        settings_path.parent.mkdir(parents=True)
        settings_path.write_text("[]")

        result = ScratchConfigPersistence(settings_path).try_load()

        assert result.is_failure()
        assert isinstance(result.error(), ConfigurationError)

    def test_try_load_success(self, settings_path):
        assert ScratchConfigPersistence(settings_path).try_load().value() == DEFAULT_CONFIG
