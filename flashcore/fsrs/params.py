"""
FSRS parameter set.

Weights and tunables are a validated configuration object handed to the
scheduler, so they can be tuned and tested independently of the algorithm.
Defaults match the values the web app shipped with.
"""

from __future__ import annotations

import math
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from flashcore.errors import InvalidParametersError


DEFAULT_W: tuple[float, ...] = (
    0.4, 0.6, 2.4, 5.8, 4.93, 0.94, 0.86, 0.01, 1.49,
    0.14, 0.94, 2.18, 0.05, 0.34, 1.26, 0.29, 2.61,
)

MAX_ABS_WEIGHT = 100.0


class FSRSParameters(BaseModel):
    """
    Tunables for the review scheduler.

    Stored user settings use camelCase keys (``requestRetention``); both
    spellings are accepted.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )

    request_retention: float = Field(0.9, gt=0.0, lt=1.0)
    maximum_interval: int = Field(36500, ge=1)
    w: tuple[float, ...] = Field(DEFAULT_W)
    initial_difficulty: float = Field(5.0, ge=1.0, le=10.0)
    fuzz_factor: float = Field(0.05, ge=0.0, lt=1.0)

    easy_factor: float = Field(1.3, gt=0.0)
    good_factor: float = Field(1.0, gt=0.0)
    hard_factor: float = Field(0.8, gt=0.0)
    again_factor: float = Field(0.5, gt=0.0)

    initial_stability: float = Field(2.0, gt=0.0)
    initial_again_interval: int = Field(1, ge=1)
    initial_hard_interval: int = Field(1, ge=1)
    initial_good_interval: int = Field(4, ge=1)
    initial_easy_interval: int = Field(15, ge=1)

    @field_validator("w")
    @classmethod
    def _check_weights(cls, value: tuple[float, ...]) -> tuple[float, ...]:
        if len(value) != len(DEFAULT_W):
            raise ValueError(f"w must contain {len(DEFAULT_W)} weights, got {len(value)}")
        for index, weight in enumerate(value):
            if not math.isfinite(weight) or abs(weight) > MAX_ABS_WEIGHT:
                raise ValueError(
                    f"w[{index}] must be finite and within +/-{MAX_ABS_WEIGHT:g}, got {weight}"
                )
        return value


def build_params(overrides: Mapping[str, Any] | None = None) -> FSRSParameters:
    """
    Build a parameter set from defaults plus optional overrides.

    Raises:
        InvalidParametersError: if any override is out of range
    """
    try:
        return FSRSParameters(**dict(overrides or {}))
    except ValidationError as exc:
        raise InvalidParametersError(f"Invalid FSRS parameters: {exc}") from exc


DEFAULT_PARAMS = FSRSParameters()
