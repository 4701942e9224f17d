"""Translation from caller-level values to Engine API payload fragments.

Functions:
    parse_ports: Expand a port map into ExposedPorts and PortBindings
    megabytes_to_bytes: Convert megabytes to bytes
    cpus_to_nano_cpus: Convert a CPU quota to NanoCPUs
    build_create_payload: Body for POST containers/create
    build_update_payload: Body for POST containers/<ref>/update
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from docker_tenant.core.constants import BYTES_PER_MEGABYTE, NANO_CPUS_PER_CPU
from docker_tenant.core.schemas import ResourceLimits


@dataclass
class PortMapping:
    """Engine structures produced from a ``{"25565/tcp": "25565"}`` style map."""

    exposed_ports: dict[str, dict[str, Any]] = field(default_factory=dict)
    port_bindings: dict[str, list[dict[str, str]]] = field(default_factory=dict)

    def __bool__(self) -> bool:
        return bool(self.exposed_ports)


def parse_ports(ports: Mapping[str, str | int] | None = None) -> PortMapping:
    """Expand container ports into exposed ports and host bindings.

    Args:
        ports: Mapping of ``"<port>/<proto>"`` to host port

    Returns:
        PortMapping whose two dicts share exactly the input keys
    """
    mapping = PortMapping()
    for container_port, host_port in (ports or {}).items():
        mapping.exposed_ports[container_port] = {}
        mapping.port_bindings[container_port] = [{"HostPort": str(host_port)}]
    return mapping


def megabytes_to_bytes(megabytes: int | float) -> int:
    """Convert megabytes to bytes."""
    return int(megabytes * BYTES_PER_MEGABYTE)


def cpus_to_nano_cpus(cpu_quota: int | float, legacy: bool = False) -> int:
    """Convert a CPU quota (number of CPUs) to NanoCPUs.

    Args:
        cpu_quota: Number of CPUs, fractions allowed
        legacy: Reproduce the arithmetic of older releases, ``(quota * 10) ^ 9``,
            where ``^`` is integer XOR rather than a power

    Returns:
        NanoCPUs value for the Engine
    """
    if legacy:
        return int(cpu_quota * 10) ^ 9
    return int(cpu_quota * NANO_CPUS_PER_CPU)


def build_create_payload(
    image: str,
    binds: Sequence[str] | None = None,
    ports: Mapping[str, str | int] | None = None,
    env: Sequence[str] | None = None,
    shell: Sequence[str] | None = None,
) -> dict[str, Any]:
    """Build the body of a container creation request.

    The container is created with an interactive TTY so the server console can
    be attached to later. ``ExposedPorts`` and ``HostConfig`` are only sent when
    at least one port is mapped; the Engine rejects empty objects there.

    Args:
        image: Image reference
        binds: Volume binds (``host:container[:mode]``)
        ports: Container port to host port map
        env: ``KEY=value`` environment entries
        shell: Shell for the container, omitted when None

    Returns:
        JSON-serialisable payload
    """
    binds = list(binds or [])
    payload: dict[str, Any] = {
        "Image": image,
        "Tty": True,
        "AttachStdin": True,
        "AttachStdout": True,
        "OpenStdin": True,
        "Env": list(env or []),
        "Binds": binds,
    }
    if shell is not None:
        payload["Shell"] = list(shell)

    port_mapping = parse_ports(ports)
    if port_mapping:
        payload["ExposedPorts"] = port_mapping.exposed_ports
        payload["HostConfig"] = {
            "Binds": binds,
            "PortBindings": port_mapping.port_bindings,
        }
    return payload


def build_update_payload(limits: ResourceLimits, legacy_nano_cpus: bool = False) -> dict[str, int]:
    """Build the body of a resource update request from caller units."""
    return {
        "CpuShares": limits.cpu_priority,
        "Memory": megabytes_to_bytes(limits.max_memory_mb),
        "MemoryReservation": megabytes_to_bytes(limits.start_memory_mb),
        "MemorySwap": megabytes_to_bytes(limits.memory_swap_mb),
        "NanoCPUs": cpus_to_nano_cpus(limits.cpu_quota, legacy=legacy_nano_cpus),
    }
