"""Tests for settings loading."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from npm_exposure.config import (
    CONFIG_PATH_ENV_VAR,
    DEFAULT_LOCK_FILES,
    ConfigError,
    Settings,
    load_settings,
)


def _write_config(tmp_path: Path, data) -> Path:
    path = tmp_path / "settings.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


class TestLoadSettings:
    def test_defaults_when_no_file(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.delenv(CONFIG_PATH_ENV_VAR, raising=False)
        settings = load_settings()
        assert settings == Settings()
        assert settings.lock_files == DEFAULT_LOCK_FILES
        assert settings.known_bad_list is None
        assert "node_modules" in settings.exclude

    def test_explicit_path(self, tmp_path):
        path = _write_config(
            tmp_path,
            {
                "knownBadList": "lists/shai-hulud.csv",
                "lockFiles": ["pnpm-lock.yaml", "package-lock.json"],
                "exclude": ["node_modules", "dist"],
            },
        )
        settings = load_settings(path)
        assert settings.known_bad_list == Path("lists/shai-hulud.csv")
        assert settings.lock_files == ("pnpm-lock.yaml", "package-lock.json")
        assert settings.exclude == frozenset({"node_modules", "dist"})

    def test_env_var_path(self, tmp_path, monkeypatch):
        path = _write_config(tmp_path, {"lockFiles": ["yarn.lock"]})
        monkeypatch.setenv(CONFIG_PATH_ENV_VAR, str(path))
        assert load_settings().lock_files == ("yarn.lock",)

    def test_default_file_in_working_directory(self, tmp_path, monkeypatch):
        _write_config(tmp_path, {"knownBadList": "bad.json"})
        monkeypatch.chdir(tmp_path)
        monkeypatch.delenv(CONFIG_PATH_ENV_VAR, raising=False)
        assert load_settings().known_bad_list == Path("bad.json")

    def test_missing_explicit_file(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            load_settings(tmp_path / "nope.json")

    def test_missing_env_file(self, tmp_path, monkeypatch):
        monkeypatch.setenv(CONFIG_PATH_ENV_VAR, str(tmp_path / "nope.json"))
        with pytest.raises(ConfigError, match="not found"):
            load_settings()

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text("{oops", encoding="utf-8")
        with pytest.raises(ConfigError, match="Invalid JSON"):
            load_settings(path)

    @pytest.mark.parametrize(
        "data, message",
        [
            ([], "must be a JSON object"),
            ({"knownBadList": 3}, "'knownBadList'"),
            ({"lockFiles": []}, "non-empty array"),
            ({"lockFiles": "yarn.lock"}, "non-empty array"),
            ({"lockFiles": [["yarn.lock"]]}, "only strings"),
            ({"lockFiles": ["Cargo.lock"]}, "Unknown lock file"),
            ({"lockFiles": ["yarn.lock", "yarn.lock"]}, "duplicates"),
            ({"exclude": [""]}, "'exclude'"),
        ],
    )
    def test_invalid_values(self, tmp_path, data, message):
        path = _write_config(tmp_path, data)
        with pytest.raises(ConfigError, match=message):
            load_settings(path)
