"""Shared constants for docker-tenant.

Centralized constants to avoid duplication between the translators,
the client and the CLI.
"""

from __future__ import annotations

# Docker Engine remote API port
DEFAULT_ENGINE_PORT = 2376

# Per-call transport timeout in seconds
DEFAULT_TIMEOUT_SECONDS = 5.0

# Pinned so the SDK client never probes /version on construction
DEFAULT_API_VERSION = "1.41"

# Unit conversions for container resource limits
BYTES_PER_MEGABYTE = 1024 * 1024
NANO_CPUS_PER_CPU = 10**9

# Grace period (seconds) before the Engine force-kills a stopping container
DEFAULT_STOP_TIMEOUT = 30

# Number of log lines requested from the Engine by default
DEFAULT_LOG_TAIL = 50

# Exec sessions run from the server directory of the game image
EXEC_WORKING_DIR = "/server"

# Injected into tenant containers so the image knows which server build to run
VERSION_ENV_VAR = "MC_VERSION"

DEFAULT_SHELL = ["/bin/bash"]

# Environment variables read by EngineConfig.from_env
PREFIX_ENV_VAR = "DOCKER_PREFIX"
TIMEOUT_ENV_VAR = "DOCKER_API_TIMEOUT"
