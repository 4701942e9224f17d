"""Tests for docker-tenant schemas."""

import pytest

from docker_tenant.core.schemas import (
    ContainerCreated,
    ContainerDetails,
    ContainerStats,
    ImageSummary,
    ResourceLimits,
)


class TestImageSummary:
    """Tests for ImageSummary schema."""

    def test_engine_fields(self):
        """Test parsing an images/json entry."""
        image = ImageSummary.model_validate(
            {
                "Id": "sha256:abc",
                "RepoTags": ["itzg/minecraft-server:latest"],
                "Created": 1700000000,
                "Size": 512,
                "Labels": {"maintainer": "itzg"},
            }
        )
        assert image.id == "sha256:abc"
        assert image.repo_tags == ["itzg/minecraft-server:latest"]
        assert image.model_extra == {"Labels": {"maintainer": "itzg"}}

    def test_has_tag_is_exact(self):
        """Test tag membership is exact and case-sensitive."""
        image = ImageSummary.model_validate({"Id": "x", "RepoTags": ["Paper:1.20"]})

        assert image.has_tag("Paper:1.20")
        assert not image.has_tag("paper:1.20")
        assert not image.has_tag("Paper")

    def test_untagged_image(self):
        """Test dangling images have no tags."""
        image = ImageSummary.model_validate({"Id": "x", "RepoTags": None})
        assert not image.has_tag("<none>:<none>")


class TestContainerRecords:
    """Tests for creation and inspection records."""

    def test_created(self):
        """Test parsing a create response."""
        created = ContainerCreated.model_validate({"Id": "abc123", "Warnings": []})
        assert created.id == "abc123"
        assert created.warnings == []

    def test_details(self):
        """Test parsing a containers/<ref>/json response."""
        details = ContainerDetails.model_validate(
            {
                "Id": "abc123",
                "Name": "/mc_srv",
                "Image": "sha256:def",
                "State": {"Status": "running", "Running": True, "Pid": 42, "ExitCode": 0},
                "Config": {"Tty": True},
            }
        )
        assert details.name == "/mc_srv"
        assert details.state.running is True
        assert details.state.pid == 42
        assert details.model_extra["Config"] == {"Tty": True}


class TestContainerStats:
    """Tests for ContainerStats schema."""

    def create_stats(self, memory_usage: int = 100 * 1024 * 1024) -> dict:
        """Create a Docker stats response."""
        return {
            "read": "2024-01-01T00:00:00Z",
            "memory_stats": {"usage": memory_usage, "limit": 1024 * 1024 * 1024},
            "cpu_stats": {
                "cpu_usage": {"total_usage": 1000000000, "percpu_usage": [500000000, 500000000]},
                "system_cpu_usage": 10000000000,
            },
            "precpu_stats": {
                "cpu_usage": {"total_usage": 900000000},
                "system_cpu_usage": 9000000000,
            },
            "pids_stats": {"current": 5},
        }

    def test_memory(self):
        """Test memory usage and percentage."""
        stats = ContainerStats.model_validate(self.create_stats(200 * 1024 * 1024))

        assert stats.memory_usage_bytes == 200 * 1024 * 1024
        assert stats.memory_percent == pytest.approx(200 / 1024 * 100, rel=0.01)

    def test_cpu_percent(self):
        """Test CPU percentage from the delta between readings."""
        stats = ContainerStats.model_validate(self.create_stats())
        assert stats.cpu_percent == pytest.approx(20.0)

    def test_cpu_percent_prefers_online_cpus(self):
        """Test online_cpus overrides the per-CPU list length."""
        data = self.create_stats()
        data["cpu_stats"]["online_cpus"] = 4
        stats = ContainerStats.model_validate(data)
        assert stats.cpu_percent == pytest.approx(40.0)

    def test_first_snapshot(self):
        """Test a snapshot without previous readings reports zero CPU."""
        stats = ContainerStats.model_validate({"memory_stats": {}, "cpu_stats": {}})

        assert stats.cpu_percent == 0.0
        assert stats.memory_percent == 0.0
        assert stats.pids == 0


class TestResourceLimits:
    """Tests for ResourceLimits schema."""

    def test_valid_limits(self):
        """Test caller units are kept as given."""
        limits = ResourceLimits(
            start_memory_mb=512,
            max_memory_mb=1024,
            memory_swap_mb=2048,
            cpu_quota=1.5,
            cpu_priority=512,
        )
        assert limits.max_memory_mb == 1024
        assert limits.cpu_quota == 1.5
