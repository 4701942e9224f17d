"""Strategies for sending a console command to a running container.

Two disjoint ways exist and they do not report outcomes the same way:

- ``ExecCommand`` creates an exec session and starts it detached. Both calls
  are status-checked, so a failure surfaces as an ``EngineError``.
- ``AttachCommand`` writes the command to the container's primary process
  through the attach websocket. The Engine sends no acknowledgement, so this
  path always reports success; only transport errors can escape it.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from docker_tenant.core.constants import EXEC_WORKING_DIR
from docker_tenant.core.errors import EngineError
from docker_tenant.core.schemas import ExecCreated

if TYPE_CHECKING:
    from docker_tenant.engine.transport import EngineTransport

logger = logging.getLogger(__name__)

Command = str | Sequence[str]


class CommandStrategy(ABC):
    """A way of delivering a command to a container."""

    def __init__(self, transport: EngineTransport) -> None:
        self._transport = transport

    @property
    @abstractmethod
    def name(self) -> str:
        """Short name used in log messages."""
        ...

    @abstractmethod
    def run(self, ref: str, cmd: Command) -> Any:
        """Deliver ``cmd`` to container ``ref``."""
        ...


class ExecCommand(CommandStrategy):
    """Run the command in a one-shot exec session (status-checked)."""

    @property
    def name(self) -> str:
        return "exec"

    def run(self, ref: str, cmd: Command) -> Any:
        """Create and start a detached exec session.

        Args:
            ref: Container hash or name
            cmd: Command line; strings are split on whitespace, quotes are kept as typed

        Returns:
            Body of the exec start response

        Raises:
            EngineError: If exec create is not 201 or has no Id, or exec start is not 200
        """
        argv = cmd.split() if isinstance(cmd, str) else list(cmd)
        message = f"Failed to execute command on container {ref}"

        created = self._transport.post(
            f"containers/{ref}/exec",
            payload={
                "Cmd": argv,
                "WorkingDir": EXEC_WORKING_DIR,
                "Tty": True,
                "AttachStdout": True,
            },
        )
        if created.status != 201:
            raise EngineError.from_response(message, created)

        try:
            exec_id = ExecCreated.model_validate(created.body).id
        except ValidationError as e:
            raise EngineError.from_response(message, created) from e
        logger.debug(f"Created exec session {exec_id} on {ref}")

        started = self._transport.post(
            f"exec/{exec_id}/start", payload={"Detach": True, "Tty": True}
        )
        if started.status != 200:
            raise EngineError.from_response(message, started)
        return started.body


class AttachCommand(CommandStrategy):
    """Type the command into the container console (fire and forget)."""

    @property
    def name(self) -> str:
        return "attach"

    def run(self, ref: str, cmd: Command) -> bool:
        """Send ``cmd`` plus a newline over the attach socket and close it.

        Returns:
            Always True; the Engine gives no delivery confirmation
        """
        line = cmd if isinstance(cmd, str) else " ".join(cmd)
        socket = self._transport.open_socket(f"containers/{ref}/attach/ws", {"stream": True})
        try:
            socket.send(line + "\n")
        finally:
            socket.close()
        return True
