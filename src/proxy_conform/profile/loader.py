"""Conform profile loading and validation.

Profiles are YAML files validated with Pydantic models and converted into
the frozen ConformProfile dataclass used by the rest of the package.
"""

from dataclasses import replace
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from proxy_conform.exceptions import ProfileValidationError
from proxy_conform.profile.models import (
    DEFAULT_PROFILE,
    AudioEncoding,
    ConformProfile,
    GeometryRules,
    MatchingRules,
    OutputRules,
    VideoEncoding,
)
from proxy_conform.profile.schema import ProfileModel


def load_profile(profile_path: Path | None) -> ConformProfile:
    """Load a profile from a YAML file.

    Args:
        profile_path: Path to the profile, or None for the defaults.

    Returns:
        Validated ConformProfile.

    Raises:
        ProfileValidationError: If the profile is invalid.
        FileNotFoundError: If the profile file does not exist.
    """
    if profile_path is None:
        return DEFAULT_PROFILE
    if not profile_path.exists():
        raise FileNotFoundError(f"Profile file not found: {profile_path}")

    try:
        with open(profile_path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ProfileValidationError(f"Invalid YAML syntax: {e}") from e

    if data is None:
        raise ProfileValidationError("Profile file is empty")
    if not isinstance(data, dict):
        raise ProfileValidationError("Profile file must be a YAML mapping")

    return load_profile_from_dict(data)


def load_profile_from_dict(data: dict[str, Any]) -> ConformProfile:
    """Validate a profile mapping.

    Raises:
        ProfileValidationError: If the data is invalid.
    """
    try:
        model = ProfileModel.model_validate(data)
    except ValidationError as e:
        message, field = _format_validation_error(e)
        raise ProfileValidationError(message, field=field) from e

    return ConformProfile(
        matching=MatchingRules(
            master_extensions=tuple(model.matching.master_extensions),
            proxy_extensions=tuple(model.matching.proxy_extensions),
            duration_fallback=model.matching.duration_fallback,
            duration_tolerance=model.matching.duration_tolerance,
        ),
        geometry=GeometryRules(
            dar_tolerance=model.geometry.dar_tolerance,
            pad_color=model.geometry.pad_color,
        ),
        video=VideoEncoding(
            encoder=model.video.encoder,
            crf=model.video.crf,
            preset=model.video.preset,
            pix_fmt=model.video.pix_fmt,
        ),
        audio=AudioEncoding(codec=model.audio.codec),
        output=OutputRules(
            container=model.output.container,
            suffix=model.output.suffix,
            min_bytes=model.output.min_bytes,
        ),
    )


def with_duration_fallback(profile: ConformProfile, enabled: bool) -> ConformProfile:
    """Return a copy of the profile with the duration fallback toggled."""
    matching = replace(profile.matching, duration_fallback=enabled)
    return replace(profile, matching=matching)


def _format_validation_error(error: ValidationError) -> tuple[str, str | None]:
    """Reduce a Pydantic error to a one-line message and the failing field."""
    errors = error.errors()
    if not errors:
        return f"Profile validation failed: {error}", None
    first = errors[0]
    loc = ".".join(str(x) for x in first.get("loc", []))
    msg = first.get("msg", str(error))
    if loc:
        return f"Profile validation failed: {loc}: {msg}", loc
    return f"Profile validation failed: {msg}", None
