"""Model configuration: floating point precision, cores and compilation."""

from __future__ import annotations

import logging
import os
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, StrictBool, ValidationError, field_validator

from ._errors import ConfigurationError

logger = logging.getLogger(__name__)


class Precision(StrEnum):
    """Floating point precision used to evaluate a model."""

    SINGLE = "single"
    DOUBLE = "double"


def detect_cores() -> int:
    """Return the number of CPU cores available to this process."""
    return os.cpu_count() or 1


class ModelConfig(BaseModel):
    """Validated settings forwarded to the execution engine.

    `n_cores` defaults to, and cannot exceed, the number of detected cores.
    Requests outside ``1..detected`` are clamped to the detected number with
    a warning rather than rejected.
    """

    model_config = ConfigDict(frozen=True, validate_default=True)

    precision: Precision = Precision.SINGLE
    n_cores: int | None = None
    compile: StrictBool = True

    @field_validator("n_cores", mode="after")
    @classmethod
    def _clamp_n_cores(cls, value: int | None) -> int:
        n_detected = detect_cores()
        if value is None:
            return n_detected
        if not 1 <= value <= n_detected:
            logger.warning(
                "%d cores were requested, but only %d cores are available. Using %d cores.",
                value,
                n_detected,
                n_detected,
            )
            return n_detected
        return value


def resolve_config(
    precision: str | Precision = Precision.SINGLE,
    n_cores: int | None = None,
    *,
    compile: bool = True,  # noqa: A002
) -> ModelConfig:
    """Validate model settings.

    Args:
        precision: "single" or "double".
        n_cores: Number of cores, or None for all detected cores.
        compile: Whether the engine should prepare the graph ahead of time.

    Returns:
        The validated ModelConfig.

    Raises:
        ConfigurationError: If a setting has an invalid value or type.

    """
    try:
        return ModelConfig(precision=precision, n_cores=n_cores, compile=compile)
    except ValidationError as e:
        problems = "; ".join(f"{'.'.join(map(str, err['loc']))}: {err['msg']}" for err in e.errors())
        msg = f"Invalid model configuration: {problems}"
        raise ConfigurationError(msg) from e
