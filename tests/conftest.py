"""Shared fixtures for docker-tenant tests."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from docker_tenant.core.config import EngineConfig
from docker_tenant.engine.client import EngineClient
from docker_tenant.engine.transport import EngineTransport


@pytest.fixture
def config() -> EngineConfig:
    return EngineConfig(host_ip="10.0.0.5", container_prefix="mc_")


@pytest.fixture
def transport() -> MagicMock:
    """Transport double; each test sets the responses it needs."""
    return MagicMock(spec=EngineTransport)


@pytest.fixture
def client(config: EngineConfig, transport: MagicMock) -> EngineClient:
    return EngineClient(config, transport=transport)
