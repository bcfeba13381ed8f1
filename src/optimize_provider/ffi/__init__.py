"""Optional gateway to external constraint, LP and routing solvers."""

from __future__ import annotations

from typing import Tuple

from ..config import ProviderConfig
from .gateway import BACKEND_DISTRIBUTIONS, ConstraintGateway, backend_available
from .model import LinearModel, LinearPayload, RoutingPayload, parse_payload
from .stub import UnavailableProvider


def build_constraint_provider(config: ProviderConfig) -> Tuple[object, bool, str]:
    """Return ``(provider, enabled, reason)`` for the ``optimize.constraint`` entry."""
    if not config.enable_ffi:
        reason = "FFI gateway disabled (set OPTIMIZE_PROVIDER_FFI=1 to enable)"
        return UnavailableProvider(reason), False, reason
    if not backend_available(config.ffi_backend):
        distribution = BACKEND_DISTRIBUTIONS[config.ffi_backend]
        reason = f"backend '{config.ffi_backend}' needs the '{distribution}' package (pip install optimize-provider[ffi])"
        return UnavailableProvider(reason), False, reason
    return ConstraintGateway(config.ffi_backend), True, ""


__all__ = [
    "ConstraintGateway",
    "LinearModel",
    "LinearPayload",
    "RoutingPayload",
    "UnavailableProvider",
    "backend_available",
    "build_constraint_provider",
    "parse_payload",
]
