"""docker-tenant - Docker Engine facade for multi-tenant hosting."""

from __future__ import annotations

from docker_tenant.core.config import EngineConfig, load_config
from docker_tenant.core.errors import (
    Conflict,
    EngineError,
    EngineUnavailable,
    NotFound,
    UnexpectedStatus,
)
from docker_tenant.engine.client import EngineClient

__version__ = "0.1.0"

__all__ = [
    "Conflict",
    "EngineClient",
    "EngineConfig",
    "EngineError",
    "EngineUnavailable",
    "NotFound",
    "UnexpectedStatus",
    "load_config",
    "__version__",
]
