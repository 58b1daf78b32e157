from __future__ import annotations

import json
import os
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from apps.shot.settings import ShotSettings

ENV_PREFIX = "CLEARSHOT_"
DEFAULT_PROFILE = "dev"

# --- profile files ------------------------------------------------------------


def _project_root() -> Path:
    here = Path(__file__).resolve()
    for parent in here.parents:
        if (parent / "pyproject.toml").is_file():
            return parent
    return Path.cwd()


def profiles_dir(env: Mapping[str, str]) -> Path:
    """configs/profiles under the project root, or CLEARSHOT_CONFIG_DIR when set."""
    custom = env.get(f"{ENV_PREFIX}CONFIG_DIR")
    return Path(custom) if custom else _project_root() / "configs" / "profiles"


def _read_shot_table(env: Mapping[str, str], profile: str) -> Mapping[str, Any]:
    path = profiles_dir(env) / f"{profile}.toml"
    if not path.is_file():
        return {}
    try:
        doc = tomllib.loads(path.read_text("utf-8"))
    except tomllib.TOMLDecodeError as e:
        raise RuntimeError(f"Failed to parse profile TOML: {path}") from e
    table = doc.get("shot", {})
    return table if isinstance(table, dict) else {}


# --- environment ----------------------------------------------------------------


def _decode(raw: str) -> Any:
    # JSON when it parses (numbers, bools, nested tables), plain text otherwise
    try:
        return json.loads(raw)
    except ValueError:
        return raw


def _env_overrides(names: set[str], env: Mapping[str, str]) -> dict[str, Any]:
    """CLEARSHOT_<FIELD> for every top-level field; the suffix is case-insensitive."""
    by_upper = {n.upper(): n for n in names}
    found: dict[str, Any] = {}
    for key, raw in env.items():
        head, suffix = key[: len(ENV_PREFIX)], key[len(ENV_PREFIX) :]
        if head.upper() != ENV_PREFIX:
            continue
        name = by_upper.get(suffix.upper())
        if name is not None:
            found[name] = _decode(raw)
    return found


def _merge(base: dict[str, Any], over: Mapping[str, Any]) -> None:
    # one level deep so [shot.capture] can set a single key
    for k, v in over.items():
        if isinstance(v, Mapping) and isinstance(base.get(k), dict):
            base[k] = {**base[k], **v}
        else:
            base[k] = v


# --- public API ---------------------------------------------------------------


def load_shot_settings(
    env: Mapping[str, str] | None = None, profile: str | None = None
) -> ShotSettings:
    """
    Build ShotSettings from model defaults, then the [shot] table of the
    profile TOML, then CLEARSHOT_* variables (last one wins).

    Examples: CLEARSHOT_DELAY_S=5, CLEARSHOT_OUTPUT_DIR=D:/shots,
    CLEARSHOT_CAPTURE={"monitor": 2}
    """
    env = os.environ if env is None else env
    profile = (profile or env.get(f"{ENV_PREFIX}PROFILE") or DEFAULT_PROFILE).strip()

    values = ShotSettings.model_construct().model_dump()
    _merge(values, _read_shot_table(env, profile))
    _merge(values, _env_overrides(set(values), env))
    return ShotSettings.model_validate(values)
