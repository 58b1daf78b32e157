from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError
from shared.config.loader import load_shot_settings


def _write_profile(dirpath: Path, name: str, text: str) -> Path:
    dirpath.mkdir(parents=True, exist_ok=True)
    p = dirpath / f"{name}.toml"
    p.write_text(text, encoding="utf-8")
    return p


def test_defaults_when_no_profile_and_no_env(tmp_path: Path):
    # Empty profiles dir; no other env -> model defaults
    s = load_shot_settings(env={"CLEARSHOT_CONFIG_DIR": str(tmp_path)}, profile="dev")
    assert s.capture.adapter == "mss"
    assert s.capture.monitor == 0
    assert s.delay_s == 0.0
    assert s.output_dir is None
    assert s.filename_pattern == "screenshot_%Y-%m-%d_%H-%M-%S.png"
    assert s.png_compress_level == 9
    assert s.dpi_aware is True


def test_toml_overlay(tmp_path: Path):
    profiles = tmp_path / "profiles"
    _write_profile(
        profiles,
        "dev",
        """
        [shot]
        delay_s = 5.0
        output_dir = "shots"
        png_compress_level = 6

        [shot.capture]
        monitor = 2
        """,
    )

    env = {"CLEARSHOT_CONFIG_DIR": str(profiles), "CLEARSHOT_PROFILE": "dev"}
    s = load_shot_settings(env=env)
    assert s.delay_s == 5.0
    assert s.output_dir == Path("shots")
    assert s.png_compress_level == 6
    assert s.capture.monitor == 2
    assert s.capture.adapter == "mss"  # untouched key keeps its default


def test_env_overrides_toml(tmp_path: Path):
    profiles = tmp_path / "profiles"
    _write_profile(
        profiles,
        "dev",
        """
        [shot]
        delay_s = 1.0
        log_level = "INFO"
        """,
    )

    env = {
        "CLEARSHOT_CONFIG_DIR": str(profiles),
        "CLEARSHOT_PROFILE": "dev",
        # Flat CLEARSHOT_* keys override TOML
        "CLEARSHOT_DELAY_S": "2.5",  # JSON number
        "CLEARSHOT_LOG_LEVEL": "DEBUG",  # plain string
        "clearshot_dpi_aware": "false",  # case-insensitive
        "CLEARSHOT_CAPTURE": '{"monitor": 1}',
    }
    s = load_shot_settings(env=env)
    assert s.delay_s == 2.5
    assert s.log_level == "DEBUG"
    assert s.dpi_aware is False
    assert s.capture.monitor == 1


def test_profile_dir_override_via_env(tmp_path: Path):
    profiles = tmp_path / "custom_profiles"
    _write_profile(
        profiles,
        "myprof",
        """
        [shot]
        filename_pattern = "clip_%H%M%S.png"
        """,
    )

    env = {"CLEARSHOT_CONFIG_DIR": str(profiles), "CLEARSHOT_PROFILE": "myprof"}
    s = load_shot_settings(env=env)
    assert s.filename_pattern == "clip_%H%M%S.png"


def test_bad_toml_raises_runtime_error(tmp_path: Path):
    profiles = tmp_path / "profiles"
    # Intentionally broken TOML
    _write_profile(profiles, "dev", "[shot]\nthis = not_valid\n")

    env = {"CLEARSHOT_CONFIG_DIR": str(profiles), "CLEARSHOT_PROFILE": "dev"}

    with pytest.raises(RuntimeError):
        _ = load_shot_settings(env=env)


def test_out_of_range_values_fail_validation(tmp_path: Path):
    env = {"CLEARSHOT_CONFIG_DIR": str(tmp_path), "CLEARSHOT_PNG_COMPRESS_LEVEL": "12"}

    with pytest.raises(ValidationError):
        load_shot_settings(env=env)
