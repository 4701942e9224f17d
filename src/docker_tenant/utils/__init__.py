"""Utility modules for docker-tenant."""

from __future__ import annotations

from docker_tenant.utils.logging import setup_logging

__all__ = ["setup_logging"]
