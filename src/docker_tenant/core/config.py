"""Engine client configuration.

The client never reads the process environment itself; everything it needs
is carried by an ``EngineConfig`` built by the caller, loaded from a YAML or
JSON file, or assembled from environment variables with ``from_env``.
"""

from __future__ import annotations

import json
import os
from collections.abc import Mapping
from pathlib import Path

import docker
import yaml
from pydantic import BaseModel, Field

from docker_tenant.core.constants import (
    DEFAULT_API_VERSION,
    DEFAULT_ENGINE_PORT,
    DEFAULT_TIMEOUT_SECONDS,
    PREFIX_ENV_VAR,
    TIMEOUT_ENV_VAR,
)


class TLSSettings(BaseModel):
    """Client certificates for an Engine listening with TLS on 2376."""

    client_cert: Path
    client_key: Path
    ca_cert: Path
    verify: bool = True

    def to_docker_tls(self) -> docker.tls.TLSConfig:
        """Convert to docker.tls.TLSConfig."""
        return docker.tls.TLSConfig(
            client_cert=(str(self.client_cert), str(self.client_key)),
            ca_cert=str(self.ca_cert),
            verify=self.verify,
        )

    def to_sslopt(self) -> dict[str, object]:
        """SSL options for the websocket attach connection."""
        import ssl

        return {
            "certfile": str(self.client_cert),
            "keyfile": str(self.client_key),
            "ca_certs": str(self.ca_cert),
            "cert_reqs": ssl.CERT_REQUIRED if self.verify else ssl.CERT_NONE,
        }


class EngineConfig(BaseModel):
    """Connection and tenancy settings for one Docker Engine.

    Attributes:
        host_ip: Engine host address
        port: Engine API port
        container_prefix: Tenant prefix prepended to container names
        timeout: Per-call transport timeout in seconds
        api_version: API version handed to the SDK client (paths stay unversioned)
        tls: Optional client certificates; switches to https/wss
        legacy_nano_cpus: Reproduce the historical XOR arithmetic for NanoCPUs
    """

    host_ip: str = Field(..., min_length=1, description="Engine host address")
    port: int = Field(default=DEFAULT_ENGINE_PORT, ge=1, le=65535)
    container_prefix: str = Field(default="", description="Tenant container name prefix")
    timeout: float = Field(default=DEFAULT_TIMEOUT_SECONDS, gt=0, description="Seconds per call")
    api_version: str = Field(default=DEFAULT_API_VERSION)
    tls: TLSSettings | None = Field(default=None)
    legacy_nano_cpus: bool = Field(
        default=False, description="Compute NanoCPUs as (quota * 10) ^ 9 like older releases"
    )

    model_config = {"frozen": True}

    @property
    def base_url(self) -> str:
        scheme = "https" if self.tls else "http"
        return f"{scheme}://{self.host_ip}:{self.port}"

    @property
    def ws_base_url(self) -> str:
        scheme = "wss" if self.tls else "ws"
        return f"{scheme}://{self.host_ip}:{self.port}"

    @property
    def docker_host(self) -> str:
        """Engine address in the tcp:// form the docker SDK expects."""
        return f"tcp://{self.host_ip}:{self.port}"

    @classmethod
    def from_env(
        cls, host_ip: str, environ: Mapping[str, str] | None = None, **overrides: object
    ) -> EngineConfig:
        """Build a config for ``host_ip`` from DOCKER_PREFIX and DOCKER_API_TIMEOUT.

        Args:
            host_ip: Engine host address
            environ: Environment mapping (defaults to os.environ)
            **overrides: Any other EngineConfig field

        Returns:
            Validated EngineConfig
        """
        if environ is None:
            environ = os.environ

        data: dict[str, object] = {"host_ip": host_ip}
        data["container_prefix"] = environ.get(PREFIX_ENV_VAR, "")
        timeout = environ.get(TIMEOUT_ENV_VAR)
        if timeout:
            data["timeout"] = timeout
        data.update(overrides)
        return cls.model_validate(data)


def load_config(path: Path | str) -> EngineConfig:
    """Load and validate an Engine configuration file.

    Args:
        path: Path to YAML or JSON configuration file

    Returns:
        Validated EngineConfig object

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If file format is unsupported
        pydantic.ValidationError: If config is invalid
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    suffix = path.suffix.lower()
    with open(path, encoding="utf-8") as f:
        if suffix in (".yaml", ".yml"):
            data = yaml.safe_load(f)
        elif suffix == ".json":
            data = json.load(f)
        else:
            raise ValueError(f"Unsupported config format: {suffix}. Use .yaml, .yml, or .json")

    return EngineConfig.model_validate(data or {})
