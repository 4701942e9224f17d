"""Core module - configuration, schemas and errors."""

from __future__ import annotations

from docker_tenant.core.config import EngineConfig, TLSSettings, load_config
from docker_tenant.core.errors import (
    Conflict,
    EngineError,
    EngineUnavailable,
    NotFound,
    UnexpectedStatus,
)
from docker_tenant.core.schemas import (
    ContainerCreated,
    ContainerDetails,
    ContainerState,
    ContainerStats,
    EngineResponse,
    ExecCreated,
    ImageSummary,
    ResourceLimits,
)

__all__ = [
    "Conflict",
    "ContainerCreated",
    "ContainerDetails",
    "ContainerState",
    "ContainerStats",
    "EngineConfig",
    "EngineError",
    "EngineResponse",
    "EngineUnavailable",
    "ExecCreated",
    "ImageSummary",
    "load_config",
    "NotFound",
    "ResourceLimits",
    "TLSSettings",
    "UnexpectedStatus",
]
