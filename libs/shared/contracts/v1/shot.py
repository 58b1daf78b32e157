from __future__ import annotations

from datetime import UTC, datetime
from typing import Literal

from pydantic import BaseModel, Field


def utc_now() -> datetime:
    return datetime.now(UTC)


class ShotReport(BaseModel):
    api: Literal["v1"] = "v1"
    path: str | None = None
    left: int
    top: int
    width: int = Field(gt=0)
    height: int = Field(gt=0)
    opaque_pixels: int = Field(default=0, ge=0)
    transparent_pixels: int = Field(default=0, ge=0)
    elapsed_s: float = Field(default=0.0, ge=0.0)
    ts: datetime = Field(default_factory=utc_now)

    @property
    def translucent_pixels(self) -> int:
        return self.width * self.height - self.opaque_pixels - self.transparent_pixels
