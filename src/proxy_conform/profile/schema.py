"""Pydantic models for conform profile files.

Every model forbids unknown keys so that typos in a profile are reported
instead of silently ignored.
"""

import re

from pydantic import BaseModel, ConfigDict, Field, field_validator

SCHEMA_VERSION = 1

VALID_PRESETS = (
    "ultrafast",
    "superfast",
    "veryfast",
    "faster",
    "fast",
    "medium",
    "slow",
    "slower",
    "veryslow",
    "placebo",
)

# ffmpeg option values are passed as separate argv entries, never through a
# shell, but they must still be single tokens
_TOKEN_PATTERN = re.compile(r"^[A-Za-z0-9_.@#-]+$")


def _validate_token(value: str, field: str) -> str:
    if not _TOKEN_PATTERN.match(value):
        raise ValueError(f"Invalid {field} '{value}'")
    return value


def _validate_extensions(values: list[str]) -> list[str]:
    cleaned = [v.strip().lstrip(".").lower() for v in values]
    if not cleaned or any(not v for v in cleaned):
        raise ValueError("extension lists must contain non-empty extensions")
    for ext in cleaned:
        _validate_token(ext, "extension")
    return cleaned


class MatchingModel(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    master_extensions: list[str] = Field(default_factory=lambda: ["mxf"])
    proxy_extensions: list[str] = Field(default_factory=lambda: ["mp4", "mov"])
    duration_fallback: bool = True
    duration_tolerance: float = Field(default=0.5, ge=0)

    @field_validator("master_extensions", "proxy_extensions")
    @classmethod
    def validate_extensions(cls, v: list[str]) -> list[str]:
        return _validate_extensions(v)


class GeometryModel(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    dar_tolerance: float = Field(default=0.001, gt=0)
    pad_color: str = "black"

    @field_validator("pad_color")
    @classmethod
    def validate_pad_color(cls, v: str) -> str:
        return _validate_token(v, "pad_color")


class VideoModel(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    encoder: str = "libx264"
    crf: int = Field(default=18, ge=0, le=51)
    preset: str = "medium"
    pix_fmt: str | None = None

    @field_validator("encoder")
    @classmethod
    def validate_encoder(cls, v: str) -> str:
        return _validate_token(v, "encoder")

    @field_validator("preset")
    @classmethod
    def validate_preset(cls, v: str) -> str:
        if v not in VALID_PRESETS:
            raise ValueError(
                f"Invalid preset '{v}'. Must be one of: {', '.join(VALID_PRESETS)}"
            )
        return v

    @field_validator("pix_fmt")
    @classmethod
    def validate_pix_fmt(cls, v: str | None) -> str | None:
        return _validate_token(v, "pix_fmt") if v is not None else None


class AudioModel(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    codec: str = "pcm_s24le"

    @field_validator("codec")
    @classmethod
    def validate_codec(cls, v: str) -> str:
        return _validate_token(v, "audio codec")


class OutputModel(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    container: str = "mov"
    suffix: str = ""
    min_bytes: int = Field(default=1024, ge=1)

    @field_validator("container")
    @classmethod
    def validate_container(cls, v: str) -> str:
        return _validate_token(v.lstrip(".").lower(), "container")

    @field_validator("suffix")
    @classmethod
    def validate_suffix(cls, v: str) -> str:
        if "/" in v or "\\" in v:
            raise ValueError("suffix must not contain path separators")
        return v


class ProfileModel(BaseModel):
    """Top-level conform profile document."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    schema_version: int
    matching: MatchingModel = Field(default_factory=MatchingModel)
    geometry: GeometryModel = Field(default_factory=GeometryModel)
    video: VideoModel = Field(default_factory=VideoModel)
    audio: AudioModel = Field(default_factory=AudioModel)
    output: OutputModel = Field(default_factory=OutputModel)

    @field_validator("schema_version")
    @classmethod
    def validate_schema_version(cls, v: int) -> int:
        if v != SCHEMA_VERSION:
            raise ValueError(
                f"Only schema_version {SCHEMA_VERSION} is supported, got {v}"
            )
        return v
