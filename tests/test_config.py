# Copyright (c) 2025 Luc Vincent. All Rights Reserved.
"""
Tests for configuration loading and validation.
"""

import pytest
import yaml


def _write_config(temp_dir, data):
    config_path = temp_dir / "config.yaml"
    with open(config_path, 'w') as f:
        yaml.dump(data, f)
    return config_path


class TestConfigLoading:
    """Test loading config files into dataclasses."""

    def test_loads_sample_config(self, sample_config_yaml):
        from worldclock.config import load_config

        config = load_config(str(sample_config_yaml))

        assert config.config_path == str(sample_config_yaml)
        assert config.window.resolution == "1024x600"
        assert config.window.font_size == 120
        assert config.logging.level == "DEBUG"
        assert len(config.clocks) == 2

    def test_zone_name_shorthand(self, sample_config_yaml):
        """A bare zone name becomes a clock labelled with that zone."""
        from worldclock.config import load_config

        config = load_config(str(sample_config_yaml))
        berlin = config.clocks[0]

        assert berlin.label == "Europe/Berlin"
        assert berlin.options == {'timezone': "Europe/Berlin"}

    def test_mapping_clock_entry(self, sample_config_yaml):
        from worldclock.config import load_config

        config = load_config(str(sample_config_yaml))
        tokyo = config.clocks[1]

        assert tokyo.label == "Tokyo"
        assert tokyo.options == {'timezone': "Asia/Tokyo", 'animationTime': 500}

    def test_label_defaults_to_timezone(self, temp_dir):
        from worldclock.config import load_config

        path = _write_config(temp_dir, {"clocks": [{"options": {"timezone": "UTC"}}]})
        config = load_config(str(path))

        assert config.clocks[0].label == "UTC"

    def test_missing_file_uses_defaults(self, temp_dir):
        from worldclock.config import load_config
        from worldclock.timezones import LOCAL

        config = load_config(str(temp_dir / "missing.yaml"))

        assert config.config_path is None
        assert config.window.resolution == "800x480"
        assert config.window.fps == 30
        assert config.logging.level == "INFO"
        assert [c.options for c in config.clocks] == [{'timezone': LOCAL}]

    def test_empty_clock_list_falls_back_to_local(self, temp_dir):
        from worldclock.config import load_config
        from worldclock.timezones import LOCAL

        path = _write_config(temp_dir, {"clocks": []})
        config = load_config(str(path))

        assert len(config.clocks) == 1
        assert config.clocks[0].options['timezone'] == LOCAL

    def test_empty_file_uses_defaults(self, temp_dir):
        from worldclock.config import load_config

        path = temp_dir / "config.yaml"
        path.write_text("")
        config = load_config(str(path))

        assert config.config_path == str(path)
        assert config.window.font_size == 96

    def test_unknown_window_keys_ignored(self, temp_dir, sample_config_dict):
        from worldclock.config import load_config

        sample_config_dict["window"]["sparkles"] = True
        path = _write_config(temp_dir, sample_config_dict)
        config = load_config(str(path))

        assert not hasattr(config.window, "sparkles")
        assert config.window.font_size == 120

    def test_malformed_yaml_uses_defaults(self, temp_dir):
        from worldclock.config import load_config

        path = temp_dir / "config.yaml"
        path.write_text("clocks: [unterminated\n")
        config = load_config(str(path))

        assert config.config_path is None

    def test_log_directory_is_expanded(self, temp_dir, sample_config_dict):
        from worldclock.config import load_config

        sample_config_dict["logging"]["directory"] = "~/worldclock-logs"
        path = _write_config(temp_dir, sample_config_dict)
        config = load_config(str(path))

        assert not config.logging.directory.startswith("~")


class TestConfigValidation:
    """Test config validation logic."""

    def test_valid_config_passes(self, sample_config_yaml):
        """Valid config should load without errors."""
        from worldclock.config import load_config, validate_config

        config = load_config(str(sample_config_yaml))
        errors = validate_config(config)

        assert len(errors) == 0, f"Unexpected errors: {errors}"

    def test_defaults_pass(self):
        from worldclock.config import WorldclockConfig, validate_config

        assert validate_config(WorldclockConfig()) == []

    def test_unknown_option_name(self, temp_dir, sample_config_dict):
        from worldclock.config import load_config, validate_config

        sample_config_dict["clocks"][1]["options"]["colour"] = "red"
        config = load_config(str(_write_config(temp_dir, sample_config_dict)))
        errors = validate_config(config)

        assert any("unknown option 'colour'" in e for e in errors)

    def test_invalid_option_value_is_not_an_error(self, temp_dir, sample_config_dict):
        """Bad option values are left for the clock to replace with defaults."""
        from worldclock.config import load_config, validate_config

        sample_config_dict["clocks"][1]["options"]["animationTime"] = 5000
        config = load_config(str(_write_config(temp_dir, sample_config_dict)))

        assert validate_config(config) == []

    def test_options_must_be_mapping(self, temp_dir, sample_config_dict):
        from worldclock.config import load_config, validate_config

        sample_config_dict["clocks"][1]["options"] = ["timezone"]
        config = load_config(str(_write_config(temp_dir, sample_config_dict)))
        errors = validate_config(config)

        assert any("must be a mapping" in e for e in errors)

    @pytest.mark.parametrize("resolution", ["800", "wide", "800x", "x480"])
    def test_invalid_resolution(self, temp_dir, sample_config_dict, resolution):
        from worldclock.config import load_config, validate_config

        sample_config_dict["window"]["resolution"] = resolution
        config = load_config(str(_write_config(temp_dir, sample_config_dict)))
        errors = validate_config(config)

        assert any("resolution" in e for e in errors)

    def test_auto_resolution_is_valid(self, temp_dir, sample_config_dict):
        from worldclock.config import load_config, validate_config

        sample_config_dict["window"]["resolution"] = "auto"
        config = load_config(str(_write_config(temp_dir, sample_config_dict)))

        assert validate_config(config) == []

    @pytest.mark.parametrize("fps", [0, 121, "fast"])
    def test_invalid_fps(self, temp_dir, sample_config_dict, fps):
        from worldclock.config import load_config, validate_config

        sample_config_dict["window"]["fps"] = fps
        config = load_config(str(_write_config(temp_dir, sample_config_dict)))
        errors = validate_config(config)

        assert any("fps" in e for e in errors)

    def test_invalid_font_size(self, temp_dir, sample_config_dict):
        from worldclock.config import load_config, validate_config

        sample_config_dict["window"]["font_size"] = 0
        config = load_config(str(_write_config(temp_dir, sample_config_dict)))
        errors = validate_config(config)

        assert any("font_size" in e for e in errors)

    def test_zero_label_font_size_is_valid(self, temp_dir, sample_config_dict):
        from worldclock.config import load_config, validate_config

        sample_config_dict["window"]["label_font_size"] = 0
        config = load_config(str(_write_config(temp_dir, sample_config_dict)))

        assert validate_config(config) == []

    @pytest.mark.parametrize("color", [[255, 255], [0, 0, 256], "white"])
    def test_invalid_color(self, temp_dir, sample_config_dict, color):
        from worldclock.config import load_config, validate_config

        sample_config_dict["window"]["font_color"] = color
        config = load_config(str(_write_config(temp_dir, sample_config_dict)))
        errors = validate_config(config)

        assert any("font_color" in e for e in errors)

    def test_invalid_log_level(self, temp_dir, sample_config_dict):
        from worldclock.config import load_config, validate_config

        sample_config_dict["logging"]["level"] = "CHATTY"
        config = load_config(str(_write_config(temp_dir, sample_config_dict)))
        errors = validate_config(config)

        assert any("Logging level" in e for e in errors)

    def test_unknown_timezone_is_reported(self, temp_dir, sample_config_dict):
        """A zone the database does not know is an error, not a silent fallback."""
        from worldclock.config import load_config, validate_config

        sample_config_dict["clocks"] = ["Nowhere/Fake"]
        config = load_config(str(_write_config(temp_dir, sample_config_dict)))
        errors = validate_config(config)

        assert any("unknown timezone 'Nowhere/Fake'" in e for e in errors)

    def test_local_timezone_is_valid(self, temp_dir, sample_config_dict):
        from worldclock.config import load_config, validate_config

        sample_config_dict["clocks"] = [{"label": "Here", "options": {"timezone": "LOCAL"}}]
        config = load_config(str(_write_config(temp_dir, sample_config_dict)))

        assert validate_config(config) == []
