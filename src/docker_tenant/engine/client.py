"""Docker Engine client for tenant game server containers.

This module drives the full container lifecycle against one Engine:
- Image discovery
- Creation with tenant naming, port bindings and environment
- Start / restart / kill / stop / delete
- Log snapshots, console commands, inspection and stats
- Resource limit updates

Each method issues exactly one Engine call (two for exec commands), compares
the status with the single success code for that operation and raises an
``EngineError`` carrying ``{status, response}`` otherwise. The client keeps
no state between calls: no registry, no retries, no locking. Concurrent calls
on the same container are only as safe as the Engine makes them.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from docker_tenant.core.config import EngineConfig
from docker_tenant.core.constants import (
    DEFAULT_LOG_TAIL,
    DEFAULT_SHELL,
    DEFAULT_STOP_TIMEOUT,
    VERSION_ENV_VAR,
)
from docker_tenant.core.errors import EngineError
from docker_tenant.core.schemas import (
    ContainerCreated,
    ContainerDetails,
    ContainerStats,
    EngineResponse,
    ImageSummary,
    ResourceLimits,
)
from docker_tenant.engine.commands import AttachCommand, Command, CommandStrategy, ExecCommand
from docker_tenant.engine.logs import normalize_log
from docker_tenant.engine.transport import EngineTransport
from docker_tenant.engine.translators import build_create_payload, build_update_payload

logger = logging.getLogger(__name__)


class EngineClient:
    """Facade over the Docker Engine HTTP/WebSocket API.

    Errors come through two separate channels:
    - ``EngineError`` (and subclasses): the Engine answered with a status other
      than the expected one.
    - ``requests`` / ``websocket`` exceptions: the Engine could not be reached
      or the call timed out. These are not wrapped.

    Example:
        ```python
        config = EngineConfig(host_ip="10.0.0.5", container_prefix="mc_")
        client = EngineClient(config)

        if not client.has_image("itzg/minecraft-server:latest"):
            raise SystemExit("image missing")

        created = client.create_container(
            "itzg/minecraft-server:latest",
            "1.20",
            "srv",
            ports={"25565/tcp": "25565"},
        )
        client.start_container(created.id)
        print(client.get_logs(created.id, lines=20))
        ```
    """

    def __init__(self, config: EngineConfig, transport: EngineTransport | None = None) -> None:
        """Initialize the client.

        Args:
            config: Engine endpoint, tenant prefix and timeout
            transport: Transport override (defaults to EngineTransport(config))
        """
        self.config = config
        self._transport = transport if transport is not None else EngineTransport(config)
        self._exec = ExecCommand(self._transport)
        self._attach = AttachCommand(self._transport)

        if config.legacy_nano_cpus:
            logger.warning(
                "legacy_nano_cpus is enabled - NanoCPUs will be computed as (quota * 10) ^ 9 "
                "instead of quota * 10**9"
            )

    @property
    def container_prefix(self) -> str:
        return self.config.container_prefix

    def close(self) -> None:
        close = getattr(self._transport, "close", None)
        if close is not None:
            close()

    def __enter__(self) -> EngineClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # -------------------------------
    # Status handling
    # -------------------------------
    def _expect(self, response: EngineResponse, status: int, message: str) -> EngineResponse:
        if response.status != status:
            error = EngineError.from_response(message, response)
            logger.warning(f"{message}: expected {status}, got {response.status}")
            raise error
        return response

    # -------------------------------
    # Images
    # -------------------------------
    def list_images(self) -> list[ImageSummary]:
        """List the images present on the Engine."""
        response = self._expect(self._transport.get("images/json"), 200, "Failed to list images")
        return [ImageSummary.model_validate(item) for item in response.body or []]

    def has_image(self, tag: str) -> bool:
        """Return True if ``tag`` appears in any image's RepoTags.

        Never raises itself, but failures of ``list_images`` propagate.
        """
        return any(image.has_tag(tag) for image in self.list_images())

    # -------------------------------
    # Creation
    # -------------------------------
    def create_container(
        self,
        image: str,
        version: str,
        name: str,
        binds: Sequence[str] | None = None,
        ports: Mapping[str, str | int] | None = None,
        env: Sequence[str] | None = None,
    ) -> ContainerCreated:
        """Create a tenant container.

        The name is prefixed with the tenant prefix and ``MC_VERSION=<version>``
        is appended to the environment.

        Args:
            image: Image reference
            version: Server version exposed to the container
            name: Container name without the tenant prefix
            binds: Volume binds
            ports: Container port to host port map, e.g. ``{"25565/tcp": "25565"}``
            env: Additional ``KEY=value`` environment entries

        Returns:
            ContainerCreated with the new container id
        """
        full_name = f"{self.container_prefix}{name}"
        environment = [*(env or []), f"{VERSION_ENV_VAR}={version}"]
        payload = build_create_payload(image, binds, ports, environment, shell=DEFAULT_SHELL)
        return self._create(full_name, payload)

    def create_abstract_container(
        self,
        image: str,
        name: str,
        binds: Sequence[str] | None = None,
        ports: Mapping[str, str | int] | None = None,
        env: Sequence[str] | None = None,
    ) -> ContainerCreated:
        """Create a container outside tenant namespacing.

        No prefix is applied and no version variable is injected; used for
        infrastructure containers shared by all tenants.
        """
        payload = build_create_payload(image, binds, ports, env)
        return self._create(name, payload)

    def _create(self, name: str, payload: dict[str, Any]) -> ContainerCreated:
        logger.info(f"Creating container {name} from {payload['Image']}")
        response = self._transport.post("containers/create", {"name": name}, payload)
        self._expect(response, 201, f"Failed to create container {name}")
        return ContainerCreated.model_validate(response.body)

    # -------------------------------
    # Lifecycle
    # -------------------------------
    def start_container(self, ref: str) -> None:
        response = self._transport.post(f"containers/{ref}/start")
        self._expect(response, 204, f"Failed to start container {ref}")

    def restart_container(self, ref: str) -> None:
        response = self._transport.post(f"containers/{ref}/restart")
        self._expect(response, 204, f"Failed to restart container {ref}")

    def kill_container(self, ref: str) -> None:
        response = self._transport.post(f"containers/{ref}/kill")
        self._expect(response, 204, f"Failed to kill container {ref}")

    def stop_container(self, ref: str, force_timeout: int = DEFAULT_STOP_TIMEOUT) -> None:
        """Stop a container.

        Args:
            ref: Container hash or name
            force_timeout: Seconds the Engine waits before force-killing
        """
        response = self._transport.post(f"containers/{ref}/stop", {"t": force_timeout})
        self._expect(response, 204, f"Failed to stop container {ref}")

    def delete_container(
        self, ref: str, delete_volumes: bool = True, force_kill: bool = True
    ) -> None:
        """Remove a container, by default with its anonymous volumes and even if running."""
        response = self._transport.delete(
            f"containers/{ref}", {"v": delete_volumes, "force": force_kill}
        )
        self._expect(response, 204, f"Failed to delete container {ref}")

    # -------------------------------
    # Console
    # -------------------------------
    def get_logs(self, ref: str, lines: int = DEFAULT_LOG_TAIL) -> list[str]:
        """Fetch the last ``lines`` stdout lines, cleaned of terminal sequences."""
        response = self._transport.get(
            f"containers/{ref}/logs", {"tail": lines, "stdout": True}
        )
        self._expect(response, 200, f"Failed to get container logs {ref}")
        return normalize_log(response.body)

    def command_strategy(self, use_rcon: int) -> CommandStrategy:
        """Exec sessions when ``use_rcon == 1``, console attach otherwise."""
        return self._exec if use_rcon == 1 else self._attach

    def send_command(self, ref: str, cmd: Command, use_rcon: int) -> Any:
        """Send a console command to a running container.

        With ``use_rcon == 1`` the command runs in a detached exec session and
        both Engine calls are status-checked. Otherwise it is typed into the
        attached console and True is returned unconditionally, since the
        attach endpoint gives no confirmation.
        """
        strategy = self.command_strategy(use_rcon)
        logger.debug(f"Sending command to {ref} via {strategy.name}")
        return strategy.run(ref, cmd)

    # -------------------------------
    # Introspection
    # -------------------------------
    def inspect(self, ref: str) -> ContainerDetails:
        response = self._transport.get(f"containers/{ref}/json")
        self._expect(response, 200, f"Failed to inspect container {ref}")
        return ContainerDetails.model_validate(response.body)

    def stats(self, ref: str) -> ContainerStats:
        """Single stats snapshot (not a stream)."""
        response = self._transport.get(f"containers/{ref}/stats", {"stream": False})
        self._expect(response, 200, f"Failed to get container stats {ref}")
        return ContainerStats.model_validate(response.body)

    # -------------------------------
    # Resources
    # -------------------------------
    def update_container(
        self,
        ref: str,
        start_memory: float,
        max_memory: float,
        memory_swap: float,
        cpu_quota: float,
        cpu_priority: int,
    ) -> list[str]:
        """Update resource limits of a container.

        Args:
            ref: Container hash or name
            start_memory: Memory reservation in MB
            max_memory: Memory limit in MB
            memory_swap: Memory + swap limit in MB
            cpu_quota: Number of CPUs
            cpu_priority: CPU shares

        Returns:
            Warnings reported by the Engine
        """
        limits = ResourceLimits(
            start_memory_mb=start_memory,
            max_memory_mb=max_memory,
            memory_swap_mb=memory_swap,
            cpu_quota=cpu_quota,
            cpu_priority=cpu_priority,
        )
        return self.update_limits(ref, limits)

    def update_limits(self, ref: str, limits: ResourceLimits) -> list[str]:
        payload = build_update_payload(limits, legacy_nano_cpus=self.config.legacy_nano_cpus)
        response = self._transport.post(f"containers/{ref}/update", payload=payload)
        self._expect(response, 200, f"Failed to update container {ref}")
        body = response.body if isinstance(response.body, dict) else {}
        return list(body.get("Warnings") or [])
