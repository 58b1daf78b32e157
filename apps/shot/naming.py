from __future__ import annotations

from datetime import datetime
from pathlib import Path


def pictures_dir() -> Path:
    """The user's Pictures folder if it exists, else the working directory."""
    candidate = Path.home() / "Pictures"
    return candidate if candidate.is_dir() else Path.cwd()


def default_filename(pattern: str, now: datetime | None = None) -> str:
    """Render the file name from local time, e.g. screenshot_2024-05-01_12-00-00.png."""
    name = (now or datetime.now()).strftime(pattern)
    return name if name.lower().endswith(".png") else f"{name}.png"


def resolve_output(
    out: str | Path | None,
    output_dir: Path | None,
    pattern: str,
    now: datetime | None = None,
) -> Path:
    """
    --out may name a file or a directory; a trailing separator or an existing
    directory means "put the generated name in here".
    """
    name = default_filename(pattern, now)
    if out is None:
        base = output_dir if output_dir is not None else pictures_dir()
        return Path(base).expanduser() / name

    text = str(out)
    p = Path(text).expanduser()
    if text.endswith(("/", "\\")) or p.is_dir():
        return p / name
    return p if p.suffix else p.with_suffix(".png")
