import json

from scale_climber.core.config import DEFAULT_CONFIGS, ConfigManager


def test_defaults_written_on_first_use(tmp_path):
    manager = ConfigManager(str(tmp_path))
    for name in DEFAULT_CONFIGS:
        assert (tmp_path / f"{name}.json").exists()
    assert manager.get_config("session")["poll_interval"] == 0.3
    assert manager.get_config("audio_input")["frame_size"] == 2048


def test_update_persists(tmp_path):
    manager = ConfigManager(str(tmp_path))
    assert manager.update_config("session", {"root_key": "G"})
    assert ConfigManager(str(tmp_path)).get_config("session")["root_key"] == "G"


def test_missing_keys_are_filled_from_defaults(tmp_path):
    (tmp_path / "mapper.json").write_text(json.dumps({"buffer_hz": 20.0}))
    config = ConfigManager(str(tmp_path)).get_config("mapper")
    assert config["buffer_hz"] == 20.0
    assert config["continuity_split"] == 3.5


def test_corrupt_file_falls_back_to_defaults(tmp_path):
    (tmp_path / "pitch_detector.json").write_text("{not json")
    config = ConfigManager(str(tmp_path)).get_config("pitch_detector")
    assert config == DEFAULT_CONFIGS["pitch_detector"]


def test_reset_and_unknown_sections(tmp_path):
    manager = ConfigManager(str(tmp_path))
    manager.update_config("session", {"base_octave": 4})
    assert manager.reset_config("session")
    assert manager.get_config("session")["base_octave"] == 3
    assert not manager.update_config("nope", {})
    assert not manager.reset_config("nope")
    assert manager.get_config("nope") == {}


def test_get_config_returns_a_copy(tmp_path):
    manager = ConfigManager(str(tmp_path))
    manager.get_config("session")["root_key"] = "B"
    assert manager.get_config("session")["root_key"] == "C"


def test_stale_keys_are_dropped(tmp_path):
    (tmp_path / "session.json").write_text(
        json.dumps({"poll_intervall": 0.2, "poll_interval": 0.1})
    )
    config = ConfigManager(str(tmp_path)).get_config("session")
    assert "poll_intervall" not in config
    assert config["poll_interval"] == 0.1
    assert set(config) == set(DEFAULT_CONFIGS["session"])


def test_update_ignores_unknown_keys(tmp_path):
    manager = ConfigManager(str(tmp_path))
    assert manager.update_config("mapper", {"edge_buffer_hz": 5.0, "buffer_hz": 12.0})
    config = manager.get_config("mapper")
    assert "edge_buffer_hz" not in config
    assert config["buffer_hz"] == 12.0
