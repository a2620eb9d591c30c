# tests/unit/config/test_settings.py
# Unit tests for StitchSettings validation & SettingsManager persistence

import json
from pathlib import Path
from types import SimpleNamespace

import pytest

from stitch.config.settings import SettingsManager, StitchSettings, get_settings


class TestStitchSettings:

    # * Defaults build without error & derive paths
    def test_defaults(self):
        s = StitchSettings()
        assert s.resume_path == Path("data") / "resume.json"
        assert s.job_path == Path("data") / "job.txt"
        assert s.history_path == Path(".stitch") / "history.json"
        assert s.queue_max_concurrent == 5
        assert s.queue_default_timeout_ms == 30000
        assert s.is_production is False

    @pytest.mark.parametrize("temperature", [-0.1, 2.5])
    def test_temperature_range(self, temperature):
        with pytest.raises(ValueError, match="temperature must be 0.0-2.0"):
            StitchSettings(temperature=temperature)

    def test_temperature_type(self):
        with pytest.raises(ValueError, match="must be a number"):
            StitchSettings(temperature="hot")

    @pytest.mark.parametrize("value", [0, -3, True, "5"])
    def test_queue_max_concurrent(self, value):
        with pytest.raises(ValueError, match="queue_max_concurrent"):
            StitchSettings(queue_max_concurrent=value)

    # * Zero timeout is allowed (disables the timer)
    def test_queue_timeout_zero_allowed(self):
        assert StitchSettings(queue_default_timeout_ms=0).queue_default_timeout_ms == 0

    def test_queue_timeout_negative(self):
        with pytest.raises(ValueError, match="queue_default_timeout_ms"):
            StitchSettings(queue_default_timeout_ms=-1)

    @pytest.mark.parametrize("name", ["queue_logging", "ai_fallback"])
    def test_strict_booleans(self, name):
        with pytest.raises(ValueError, match=name):
            StitchSettings(**{name: "yes"})

    def test_environment(self):
        assert StitchSettings(environment="production").is_production is True
        with pytest.raises(ValueError, match="environment must be one of"):
            StitchSettings(environment="staging")


class TestSettingsManager:

    def test_load_missing_file_returns_defaults(self, tmp_path):
        manager = SettingsManager(tmp_path / "none" / "config.json")
        assert manager.load() == StitchSettings()

    def test_load_caches(self, tmp_path):
        manager = SettingsManager(tmp_path / "config.json")
        assert manager.load() is manager.load()

    # * Invalid config falls back to defaults w/ a warning
    def test_load_invalid_values(self, tmp_path, capsys):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"temperature": 9}), encoding="utf-8")
        manager = SettingsManager(path)

        assert manager.load() == StitchSettings()
        out = capsys.readouterr().out
        assert "Invalid config file" in out
        assert "Using default settings" in out

    def test_load_unknown_key(self, tmp_path, capsys):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"theme": "dark"}), encoding="utf-8")
        assert SettingsManager(path).load() == StitchSettings()
        assert "Invalid config file" in capsys.readouterr().out

    def test_set_persists(self, tmp_path):
        path = tmp_path / "config.json"
        manager = SettingsManager(path)
        manager.set("model", "gpt-5")

        assert manager.get("model") == "gpt-5"
        assert json.loads(path.read_text())["model"] == "gpt-5"
        assert SettingsManager(path).load().model == "gpt-5"

    def test_set_unknown_key(self, tmp_path):
        with pytest.raises(ValueError, match="Unknown setting: nope"):
            SettingsManager(tmp_path / "config.json").set("nope", 1)

    # * Invalid values are rejected & nothing is written
    def test_set_invalid_value(self, tmp_path):
        path = tmp_path / "config.json"
        manager = SettingsManager(path)
        with pytest.raises(ValueError):
            manager.set("queue_max_concurrent", 0)
        assert not path.exists()
        assert manager.get("queue_max_concurrent") == 5

    # * Saving rebuilds the default queue so new limits apply
    def test_save_resets_default_queue(self, tmp_path):
        from stitch.queue import request_queue

        before = request_queue.get_ai_queue()
        SettingsManager(tmp_path / "config.json").set("queue_max_concurrent", 2)
        assert request_queue.get_ai_queue() is not before

    def test_reset(self, tmp_path):
        manager = SettingsManager(tmp_path / "config.json")
        manager.set("ai_fallback", False)
        manager.reset()
        assert manager.get("ai_fallback") is True

    def test_list_settings(self, tmp_path):
        listed = SettingsManager(tmp_path / "config.json").list_settings()
        assert listed["model"] == "gpt-5-mini"
        assert "queue_logging" in listed

    def test_get_unknown_returns_none(self, tmp_path):
        assert SettingsManager(tmp_path / "config.json").get("missing") is None


class TestGetSettings:

    def test_provided_wins(self):
        provided = StitchSettings(model="gpt-5")
        ctx = SimpleNamespace(obj=StitchSettings(), parent=None)
        assert get_settings(ctx, provided) is provided

    def test_from_context_obj(self):
        injected = StitchSettings(model="gpt-5-nano")
        ctx = SimpleNamespace(obj=injected, parent=None)
        assert get_settings(ctx) is injected

    def test_from_parent(self):
        injected = StitchSettings(temperature=1.0)
        parent = SimpleNamespace(obj=injected, parent=None)
        ctx = SimpleNamespace(obj=None, parent=parent)
        assert get_settings(ctx) is injected

    # * Falls back to the global manager (isolated config in tests)
    def test_fallback_to_manager(self, tmp_path):
        ctx = SimpleNamespace(obj=None, parent=None)
        settings = get_settings(ctx)
        assert isinstance(settings, StitchSettings)
        assert settings.base_dir == str(tmp_path / ".stitch")
