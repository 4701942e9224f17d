"""Pydantic schemas for docker-tenant.

This module defines the records exchanged with the Docker Engine API. Each
Engine payload is modelled with only the fields this package consumes; the
remaining fields are kept (``extra="allow"``) and stay reachable through
``model_extra`` for diagnostics.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

_ENGINE_MODEL_CONFIG = ConfigDict(extra="allow", populate_by_name=True)


class EngineResponse(BaseModel):
    """Raw outcome of a single HTTP call to the Engine.

    Attributes:
        status: HTTP status code received
        body: Decoded JSON body, plain text, or None when the body was empty
    """

    status: int
    body: Any = None


class ImageSummary(BaseModel):
    """One entry of ``GET images/json``."""

    model_config = _ENGINE_MODEL_CONFIG

    id: str = Field(default="", alias="Id")
    repo_tags: list[str] | None = Field(default=None, alias="RepoTags")
    created: int | None = Field(default=None, alias="Created")
    size: int | None = Field(default=None, alias="Size")

    def has_tag(self, tag: str) -> bool:
        """Exact, case-sensitive membership in RepoTags."""
        return tag in (self.repo_tags or [])


class ContainerCreated(BaseModel):
    """Body of a successful ``POST containers/create``."""

    model_config = _ENGINE_MODEL_CONFIG

    id: str = Field(..., alias="Id")
    warnings: list[str] | None = Field(default=None, alias="Warnings")


class ExecCreated(BaseModel):
    """Body of a successful ``POST containers/<ref>/exec``."""

    model_config = _ENGINE_MODEL_CONFIG

    id: str = Field(..., alias="Id")


class ContainerState(BaseModel):
    model_config = _ENGINE_MODEL_CONFIG

    status: str = Field(default="", alias="Status")
    running: bool = Field(default=False, alias="Running")
    paused: bool = Field(default=False, alias="Paused")
    restarting: bool = Field(default=False, alias="Restarting")
    oom_killed: bool = Field(default=False, alias="OOMKilled")
    pid: int = Field(default=0, alias="Pid")
    exit_code: int = Field(default=0, alias="ExitCode")


class ContainerDetails(BaseModel):
    """Body of ``GET containers/<ref>/json``."""

    model_config = _ENGINE_MODEL_CONFIG

    id: str = Field(..., alias="Id")
    name: str = Field(default="", alias="Name")
    image: str = Field(default="", alias="Image")
    state: ContainerState = Field(default_factory=ContainerState, alias="State")


class ContainerStats(BaseModel):
    """Single stats snapshot from ``GET containers/<ref>/stats?stream=false``.

    The nested stats blocks are kept as plain dicts since their layout differs
    between cgroups v1 and v2 hosts.
    """

    model_config = _ENGINE_MODEL_CONFIG

    read: str | None = None
    memory_stats: dict[str, Any] = Field(default_factory=dict)
    cpu_stats: dict[str, Any] = Field(default_factory=dict)
    precpu_stats: dict[str, Any] = Field(default_factory=dict)
    pids_stats: dict[str, Any] = Field(default_factory=dict)
    networks: dict[str, Any] = Field(default_factory=dict)

    @property
    def memory_usage_bytes(self) -> int:
        return int(self.memory_stats.get("usage", 0) or 0)

    @property
    def memory_limit_bytes(self) -> int:
        return int(self.memory_stats.get("limit", 0) or 0)

    @property
    def memory_percent(self) -> float:
        limit = self.memory_limit_bytes
        return (self.memory_usage_bytes / limit * 100) if limit > 0 else 0.0

    @property
    def cpu_percent(self) -> float:
        """CPU utilisation using the delta between current and previous readings."""
        cpu_usage = self.cpu_stats.get("cpu_usage", {})
        cpu_delta = cpu_usage.get("total_usage", 0) - self.precpu_stats.get(
            "cpu_usage", {}
        ).get("total_usage", 0)
        system_delta = self.cpu_stats.get("system_cpu_usage", 0) - self.precpu_stats.get(
            "system_cpu_usage", 0
        )

        if system_delta > 0 and cpu_delta > 0:
            num_cpus = (
                self.cpu_stats.get("online_cpus")
                or len(cpu_usage.get("percpu_usage") or [])
                or 1
            )
            return (cpu_delta / system_delta) * num_cpus * 100.0
        return 0.0

    @property
    def pids(self) -> int:
        return int(self.pids_stats.get("current", 0) or 0)


class ResourceLimits(BaseModel):
    """Caller-facing resource limits for ``update_container``.

    Attributes:
        start_memory_mb: Soft memory reservation in megabytes
        max_memory_mb: Hard memory limit in megabytes
        memory_swap_mb: Memory + swap ceiling in megabytes
        cpu_quota: Number of CPUs (converted to nano-CPUs)
        cpu_priority: Relative CPU shares
    """

    start_memory_mb: float
    max_memory_mb: float
    memory_swap_mb: float
    cpu_quota: float
    cpu_priority: int
