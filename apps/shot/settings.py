from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class CaptureSettings(BaseModel):
    adapter: Literal["mss"] = "mss"
    monitor: int = Field(default=0, ge=0)  # 0 = whole virtual screen


class ShotSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="CLEARSHOT_", extra="ignore")

    capture: CaptureSettings = Field(default_factory=CaptureSettings)

    # seconds to wait before the shot
    delay_s: float = Field(default=0.0, ge=0.0)

    # None -> the user's Pictures folder, falling back to cwd
    output_dir: Path | None = None
    filename_pattern: str = "screenshot_%Y-%m-%d_%H-%M-%S.png"
    png_compress_level: int = Field(default=9, ge=0, le=9)

    dpi_aware: bool = True
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
