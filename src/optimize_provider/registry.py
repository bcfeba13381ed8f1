"""Capability registry: built once, read-only afterwards."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Iterator, List, Mapping, Optional

from . import capabilities
from .config import ProviderConfig
from .ffi import build_constraint_provider
from .providers import (
    AssignmentProvider,
    KnapsackProvider,
    MaxFlowProvider,
    MinCostFlowProvider,
    Provider,
    ShortestPathProvider,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CapabilityEntry:
    identifier: str
    family: str
    provider: Provider
    enabled: bool = True
    reason: str = ""

    def describe(self) -> dict:
        return {
            "identifier": self.identifier,
            "family": self.family,
            "enabled": self.enabled,
            "reason": self.reason,
        }


class CapabilityRegistry(Mapping[str, CapabilityEntry]):
    """Immutable mapping of capability identifier to :class:`CapabilityEntry`."""

    def __init__(self, entries: Iterable[CapabilityEntry]) -> None:
        table = {}
        for entry in entries:
            if entry.identifier in table:
                raise ValueError(f"capability '{entry.identifier}' registered twice")
            table[entry.identifier] = entry
        self._entries = MappingProxyType(table)

    def __getitem__(self, identifier: str) -> CapabilityEntry:
        return self._entries[identifier]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def lookup(self, identifier: str) -> Optional[CapabilityEntry]:
        return self._entries.get(identifier)

    def describe(self) -> List[dict]:
        return [entry.describe() for entry in self._entries.values()]


def build_registry(config: Optional[ProviderConfig] = None) -> CapabilityRegistry:
    config = config or ProviderConfig()
    entries = [
        CapabilityEntry(
            capabilities.ASSIGNMENT,
            "assignment",
            AssignmentProvider(
                auction_threshold=config.assignment_auction_threshold,
                tolerance=config.assignment_tolerance,
            ),
        ),
        CapabilityEntry(capabilities.KNAPSACK, "knapsack", KnapsackProvider()),
        CapabilityEntry(capabilities.SHORTEST_PATH, "shortest_path", ShortestPathProvider()),
        CapabilityEntry(
            capabilities.MAX_FLOW,
            "max_flow",
            MaxFlowProvider(global_relabel_frequency=config.maxflow_global_relabel_frequency),
        ),
        CapabilityEntry(capabilities.MIN_COST_FLOW, "min_cost_flow", MinCostFlowProvider()),
    ]

    provider, enabled, reason = build_constraint_provider(config)
    entries.append(
        CapabilityEntry(capabilities.CONSTRAINT, "constraint", provider, enabled=enabled, reason=reason)
    )
    if not enabled:
        logger.info("%s registered disabled: %s", capabilities.CONSTRAINT, reason)

    registry = CapabilityRegistry(entries)
    logger.debug("capability registry built with %d entries", len(registry))
    return registry
