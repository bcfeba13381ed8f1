from __future__ import annotations

import os
from typing import Literal, Mapping, Optional

from pydantic import BaseModel, Field

FfiBackend = Literal["ortools", "highs"]

ENV_PREFIX = "OPTIMIZE_PROVIDER_"

# environment suffix -> field; values go through pydantic's lax string parsing
_ENV_FIELDS = {
    "FFI": "enable_ffi",
    "FFI_BACKEND": "ffi_backend",
    "AUCTION_THRESHOLD": "assignment_auction_threshold",
    "ASSIGNMENT_TOLERANCE": "assignment_tolerance",
    "KNAPSACK_MEMORY_BUDGET": "knapsack_memory_budget_bytes",
    "GLOBAL_RELABEL_FREQUENCY": "maxflow_global_relabel_frequency",
    "CHECKPOINT_INTERVAL": "checkpoint_interval",
    "TIME_LIMIT": "default_time_limit_seconds",
    "ITERATION_LIMIT": "iteration_limit",
}


class ProviderConfig(BaseModel):
    """Solver configuration fixed when the capability registry is built."""

    enable_ffi: bool = False
    ffi_backend: FfiBackend = "ortools"
    assignment_auction_threshold: int = Field(default=64, ge=1)
    assignment_tolerance: float = Field(default=1e-9, ge=0.0)
    knapsack_memory_budget_bytes: int = Field(default=256 * 1024 * 1024, ge=1)
    maxflow_global_relabel_frequency: float = Field(default=1.0, gt=0.0)
    checkpoint_interval: int = Field(default=256, ge=1)
    default_time_limit_seconds: Optional[float] = Field(default=None, ge=0.0)
    iteration_limit: Optional[int] = Field(default=None, ge=1)

    model_config = {"frozen": True}

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ProviderConfig":
        """Read ``OPTIMIZE_PROVIDER_*`` variables.

        A malformed value raises :class:`pydantic.ValidationError` naming the field.
        """
        env = os.environ if environ is None else environ
        values: dict = {}
        for suffix, field_name in _ENV_FIELDS.items():
            raw = env.get(f"{ENV_PREFIX}{suffix}")
            if raw is None or not raw.strip():
                continue
            values[field_name] = raw.strip()
        if "ffi_backend" in values:
            values["ffi_backend"] = values["ffi_backend"].lower()
        return cls.model_validate(values)


class SolveOptions(BaseModel):
    """Per-call options. Unset fields fall back to the config defaults."""

    time_limit_seconds: Optional[float] = Field(default=None, ge=0.0)
    iteration_limit: Optional[int] = Field(default=None, ge=1)
