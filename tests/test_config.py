from __future__ import annotations

from pathlib import Path
import textwrap

import pytest

from holland.config import (
    AppConfig,
    EscortConfig,
    TunnelConfigError,
    default_tunnels_config,
    load_config,
)


VALID_YAML = """
schedule:
  pace_start_min: 10
  official_reset_mins: 5

eastbound:
  offset_min: 45
  pen_relative_x: -80
  pen_relative_y: 110

westbound:
  offset_min: 15
  pen_relative_x: 870
  pen_relative_y: -80

display:
  width: 1200
  height: 460
  margin_x: 200
  westbound_y: 100
  eastbound_y: 250
  fps: 10

logging:
  level: "INFO"
  log_dir: "logs/"
"""

REPO_CONFIG = Path(__file__).resolve().parents[1] / "config" / "config.yaml"


def _write_yaml(tmp_path, contents: str) -> str:
    path = tmp_path / "config.yaml"
    path.write_text(textwrap.dedent(contents))
    return str(path)


def test_load_config_valid(tmp_path, monkeypatch) -> None:
    path = _write_yaml(tmp_path, VALID_YAML)

    monkeypatch.delenv("HOLLAND_LOG_LEVEL", raising=False)
    config = load_config(path)

    assert isinstance(config, AppConfig)
    assert config.tunnels == default_tunnels_config()
    assert config.tunnels.eb.offset_min == 45
    assert config.tunnels.wb.pen_relative_x == 870
    assert config.display.width == 1200
    assert config.display.fps == 10
    assert config.log.level == "INFO"


def test_repo_config_matches_defaults(monkeypatch) -> None:
    monkeypatch.delenv("HOLLAND_LOG_LEVEL", raising=False)

    config = load_config(str(REPO_CONFIG))

    assert config.tunnels == default_tunnels_config()


def test_log_level_from_environment(tmp_path, monkeypatch) -> None:
    path = _write_yaml(tmp_path, VALID_YAML)

    monkeypatch.setenv("HOLLAND_LOG_LEVEL", "DEBUG")
    config = load_config(path)

    assert config.log.level == "DEBUG"


def test_direction_section_overrides_schedule(tmp_path) -> None:
    yaml_text = VALID_YAML.replace(
        "  offset_min: 15\n",
        "  offset_min: 15\n  cars_per_min: 2\n",
    )
    path = _write_yaml(tmp_path, yaml_text)

    config = load_config(path)

    assert config.tunnels.wb.cars_per_min == 2
    assert config.tunnels.eb.cars_per_min == 1


def test_escort_sections_are_optional(tmp_path) -> None:
    path = _write_yaml(tmp_path, VALID_YAML + "\nsweep:\n  mph: 10\n")

    config = load_config(path)

    assert config.tunnels.sweep == EscortConfig(mph=10, staging_offset=35, vertical_offset=30)
    assert config.tunnels.pace.mph == 24


def test_load_config_missing_file(tmp_path) -> None:
    missing_path = tmp_path / "does_not_exist.yaml"

    with pytest.raises(ValueError):
        load_config(str(missing_path))


def test_load_config_missing_westbound(tmp_path) -> None:
    yaml_text = """
    eastbound:
      offset_min: 45
      pen_relative_x: -80
      pen_relative_y: 110
    display:
      width: 1200
      height: 460
      margin_x: 200
      westbound_y: 100
      eastbound_y: 250
      fps: 10
    logging:
      level: "INFO"
      log_dir: "logs/"
    """
    path = _write_yaml(tmp_path, yaml_text)

    with pytest.raises(ValueError, match="westbound"):
        load_config(path)


def test_load_config_missing_offset(tmp_path) -> None:
    path = _write_yaml(tmp_path, VALID_YAML.replace("  offset_min: 45\n", ""))

    with pytest.raises(ValueError, match="offset_min"):
        load_config(path)


def test_load_config_section_must_be_mapping(tmp_path) -> None:
    path = _write_yaml(tmp_path, VALID_YAML.replace("schedule:\n", "schedule: 3\nunused:\n"))

    with pytest.raises(ValueError, match="schedule"):
        load_config(path)


def test_load_config_unknown_key(tmp_path) -> None:
    path = _write_yaml(tmp_path, VALID_YAML.replace("schedule:\n", "schedule:\n  lanes: 3\n"))

    with pytest.raises(ValueError, match="lanes"):
        load_config(path)


def test_load_config_invalid_schedule(tmp_path) -> None:
    path = _write_yaml(tmp_path, VALID_YAML.replace("pace_start_min: 10", "pace_start_min: 4"))

    with pytest.raises(TunnelConfigError):
        load_config(path)


def test_load_config_top_level_must_be_mapping(tmp_path) -> None:
    path = _write_yaml(tmp_path, "- just\n- a list\n")

    with pytest.raises(ValueError):
        load_config(path)


def test_log_level_required_even_with_environment_override(tmp_path, monkeypatch) -> None:
    path = _write_yaml(tmp_path, VALID_YAML.replace('  level: "INFO"\n', ""))

    monkeypatch.setenv("HOLLAND_LOG_LEVEL", "DEBUG")
    with pytest.raises(ValueError, match="level"):
        load_config(path)
