"""Engine module - Docker Engine API client, transport and translators."""

from __future__ import annotations

from docker_tenant.engine.client import EngineClient
from docker_tenant.engine.commands import AttachCommand, CommandStrategy, ExecCommand
from docker_tenant.engine.logs import normalize_log
from docker_tenant.engine.translators import (
    PortMapping,
    build_create_payload,
    build_update_payload,
    cpus_to_nano_cpus,
    megabytes_to_bytes,
    parse_ports,
)
from docker_tenant.engine.transport import EngineTransport

__all__ = [
    "AttachCommand",
    "CommandStrategy",
    "EngineClient",
    "EngineTransport",
    "ExecCommand",
    "PortMapping",
    "build_create_payload",
    "build_update_payload",
    "cpus_to_nano_cpus",
    "megabytes_to_bytes",
    "normalize_log",
    "parse_ports",
]
