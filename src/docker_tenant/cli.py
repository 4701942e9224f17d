"""CLI for docker-tenant.

Provides a command-line interface using Typer for driving one Engine by hand:
- Listing and checking images
- Creating tenant and infrastructure containers
- Lifecycle operations, logs, console commands
- Inspecting, stats and resource updates
"""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any, TypeVar

import requests
import typer
import websocket
from rich.console import Console
from rich.table import Table

from docker_tenant.core.config import EngineConfig, load_config
from docker_tenant.core.constants import DEFAULT_LOG_TAIL, DEFAULT_STOP_TIMEOUT
from docker_tenant.core.errors import EngineError
from docker_tenant.core.schemas import ContainerDetails, ContainerStats, ImageSummary
from docker_tenant.engine.client import EngineClient
from docker_tenant.utils.logging import setup_logging

app = typer.Typer(
    name="docker-tenant",
    help="Drive a remote Docker Engine for tenant containers",
    add_completion=False,
)

console = Console()

T = TypeVar("T")


@app.callback()
def main(
    ctx: typer.Context,
    host: str | None = typer.Option(
        None, "--host", "-H", envvar="DOCKER_TENANT_HOST", help="Engine host address"
    ),
    config: Path | None = typer.Option(
        None, "--config", "-c", help="Engine configuration file (YAML/JSON)"
    ),
    port: int | None = typer.Option(None, "--port", help="Engine API port (default 2376)"),
    prefix: str | None = typer.Option(None, "--prefix", help="Tenant container name prefix"),
    timeout: float | None = typer.Option(None, "--timeout", help="Per-call timeout in seconds"),
    log_level: str = typer.Option("WARNING", "--log-level", "-l", help="Logging level"),
    json_logs: bool = typer.Option(False, "--json-logs", help="Output logs in JSON format"),
) -> None:
    """Drive a remote Docker Engine."""
    setup_logging(level=log_level, json_format=json_logs, rich_console=not json_logs)
    ctx.obj = {
        "host": host,
        "config": config,
        "overrides": {
            key: value
            for key, value in {"port": port, "container_prefix": prefix, "timeout": timeout}.items()
            if value is not None
        },
    }


def _resolve_config(settings: dict[str, Any]) -> EngineConfig:
    """Merge the config file, environment and command-line overrides."""
    overrides = dict(settings["overrides"])
    if settings["host"]:
        overrides["host_ip"] = settings["host"]

    if settings["config"] is not None:
        base = load_config(settings["config"])
        return EngineConfig.model_validate({**base.model_dump(), **overrides})

    if "host_ip" not in overrides:
        console.print("[bold red]Error:[/] pass --host or --config")
        raise typer.Exit(2)

    host_ip = overrides.pop("host_ip")
    return EngineConfig.from_env(host_ip, **overrides)


def _call(ctx: typer.Context, operation: Callable[[EngineClient], T]) -> T:
    """Run ``operation`` with a client, turning failures into exit codes."""
    try:
        engine_config = _resolve_config(ctx.obj)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Error loading config: {e}[/]")
        raise typer.Exit(2) from e

    with EngineClient(engine_config) as client:
        try:
            return operation(client)
        except EngineError as e:
            console.print(f"[bold red]{e.message}[/]")
            console.print(json.dumps(e.context, indent=2, default=str), highlight=False)
            raise typer.Exit(1) from e
        except (requests.RequestException, websocket.WebSocketException, OSError) as e:
            console.print(f"[bold red]Engine unreachable: {e}[/]")
            raise typer.Exit(2) from e


def _parse_ports(values: list[str] | None) -> dict[str, str]:
    """Parse ``25565/tcp=25565`` options; the protocol defaults to tcp."""
    ports: dict[str, str] = {}
    for value in values or []:
        container_port, sep, host_port = value.partition("=")
        if not sep or not container_port or not host_port:
            raise typer.BadParameter(f"expected CONTAINER[/PROTO]=HOST, got {value!r}")
        if "/" not in container_port:
            container_port = f"{container_port}/tcp"
        ports[container_port] = host_port
    return ports


@app.command()
def images(ctx: typer.Context) -> None:
    """List images on the Engine."""
    result = _call(ctx, lambda client: client.list_images())
    _show_images_table(result)


@app.command("has-image")
def has_image(ctx: typer.Context, tag: str = typer.Argument(..., help="Image tag")) -> None:
    """Check whether an image tag is present (exit code 1 if missing)."""
    if _call(ctx, lambda client: client.has_image(tag)):
        console.print(f"[bold green]{tag} is present[/]")
        return
    console.print(f"[bold yellow]{tag} is missing[/]")
    raise typer.Exit(1)


@app.command()
def create(
    ctx: typer.Context,
    image: str = typer.Argument(..., help="Image reference"),
    version: str = typer.Argument(..., help="Server version (MC_VERSION)"),
    name: str = typer.Argument(..., help="Container name without tenant prefix"),
    bind: list[str] | None = typer.Option(None, "--bind", "-b", help="Volume bind"),
    port: list[str] | None = typer.Option(None, "--port", "-p", help="CONTAINER/PROTO=HOST"),
    env: list[str] | None = typer.Option(None, "--env", "-e", help="KEY=value"),
) -> None:
    """Create a tenant container."""
    ports = _parse_ports(port)
    created = _call(
        ctx, lambda client: client.create_container(image, version, name, bind, ports, env)
    )
    console.print(f"[bold green]Created {created.id}[/]")
    for warning in created.warnings or []:
        console.print(f"[yellow]{warning}[/]")


@app.command("create-abstract")
def create_abstract(
    ctx: typer.Context,
    image: str = typer.Argument(..., help="Image reference"),
    name: str = typer.Argument(..., help="Container name"),
    bind: list[str] | None = typer.Option(None, "--bind", "-b", help="Volume bind"),
    port: list[str] | None = typer.Option(None, "--port", "-p", help="CONTAINER/PROTO=HOST"),
    env: list[str] | None = typer.Option(None, "--env", "-e", help="KEY=value"),
) -> None:
    """Create a container without tenant prefix or version variable."""
    ports = _parse_ports(port)
    created = _call(
        ctx, lambda client: client.create_abstract_container(image, name, bind, ports, env)
    )
    console.print(f"[bold green]Created {created.id}[/]")


@app.command()
def start(ctx: typer.Context, ref: str = typer.Argument(..., help="Container hash or name")) -> None:
    """Start a container."""
    _call(ctx, lambda client: client.start_container(ref))
    console.print(f"[bold green]Started {ref}[/]")


@app.command()
def restart(
    ctx: typer.Context, ref: str = typer.Argument(..., help="Container hash or name")
) -> None:
    """Restart a container."""
    _call(ctx, lambda client: client.restart_container(ref))
    console.print(f"[bold green]Restarted {ref}[/]")


@app.command()
def kill(ctx: typer.Context, ref: str = typer.Argument(..., help="Container hash or name")) -> None:
    """Kill a container."""
    _call(ctx, lambda client: client.kill_container(ref))
    console.print(f"[bold green]Killed {ref}[/]")


@app.command()
def stop(
    ctx: typer.Context,
    ref: str = typer.Argument(..., help="Container hash or name"),
    timeout: int = typer.Option(
        DEFAULT_STOP_TIMEOUT, "--time", "-t", help="Seconds before the Engine force-kills"
    ),
) -> None:
    """Stop a container."""
    _call(ctx, lambda client: client.stop_container(ref, timeout))
    console.print(f"[bold green]Stopped {ref}[/]")


@app.command()
def logs(
    ctx: typer.Context,
    ref: str = typer.Argument(..., help="Container hash or name"),
    lines: int = typer.Option(DEFAULT_LOG_TAIL, "--lines", "-n", help="Number of lines"),
) -> None:
    """Print the last lines of a container's console."""
    for line in _call(ctx, lambda client: client.get_logs(ref, lines)):
        console.print(line, markup=False, highlight=False)


@app.command()
def send(
    ctx: typer.Context,
    ref: str = typer.Argument(..., help="Container hash or name"),
    command: str = typer.Argument(..., help="Console command"),
    rcon: bool = typer.Option(False, "--rcon", help="Run through an exec session"),
) -> None:
    """Send a console command to a container."""
    _call(ctx, lambda client: client.send_command(ref, command, 1 if rcon else 0))
    if rcon:
        console.print(f"[bold green]Executed on {ref}[/]")
    else:
        # attach gives no confirmation
        console.print(f"[bold]Sent to {ref}[/]")


@app.command()
def inspect(
    ctx: typer.Context, ref: str = typer.Argument(..., help="Container hash or name")
) -> None:
    """Show container state."""
    _show_details(_call(ctx, lambda client: client.inspect(ref)))


@app.command()
def stats(ctx: typer.Context, ref: str = typer.Argument(..., help="Container hash or name")) -> None:
    """Show a single stats snapshot."""
    _show_stats(ref, _call(ctx, lambda client: client.stats(ref)))


@app.command()
def delete(
    ctx: typer.Context,
    ref: str = typer.Argument(..., help="Container hash or name"),
    keep_volumes: bool = typer.Option(False, "--keep-volumes", help="Keep anonymous volumes"),
    no_force: bool = typer.Option(False, "--no-force", help="Refuse to remove a running container"),
) -> None:
    """Remove a container."""
    _call(ctx, lambda client: client.delete_container(ref, not keep_volumes, not no_force))
    console.print(f"[bold green]Deleted {ref}[/]")


@app.command()
def update(
    ctx: typer.Context,
    ref: str = typer.Argument(..., help="Container hash or name"),
    start_memory: float = typer.Option(..., "--start-memory", help="Reservation in MB"),
    max_memory: float = typer.Option(..., "--max-memory", help="Limit in MB"),
    memory_swap: float = typer.Option(..., "--memory-swap", help="Memory + swap in MB"),
    cpu_quota: float = typer.Option(..., "--cpu-quota", help="Number of CPUs"),
    cpu_priority: int = typer.Option(1024, "--cpu-priority", help="CPU shares"),
) -> None:
    """Update resource limits of a container."""
    warnings = _call(
        ctx,
        lambda client: client.update_container(
            ref, start_memory, max_memory, memory_swap, cpu_quota, cpu_priority
        ),
    )
    console.print(f"[bold green]Updated {ref}[/]")
    for warning in warnings:
        console.print(f"[yellow]{warning}[/]")


@app.command("init-config")
def init_config(
    output: Path = typer.Option(
        Path("engine.yaml"), "--output", "-o", help="Output configuration file"
    ),
) -> None:
    """Generate a sample configuration file."""
    sample_config = """\
# docker-tenant Engine configuration
host_ip: "10.0.0.5"
port: 2376

# Prepended to every tenant container name
container_prefix: "mc_"

# Seconds per Engine call
timeout: 5

# Client certificates when the Engine listens with TLS
# tls:
#   client_cert: /etc/docker-tenant/cert.pem
#   client_key: /etc/docker-tenant/key.pem
#   ca_cert: /etc/docker-tenant/ca.pem
#   verify: true

# Only for deployments tuned against the old (quota * 10) ^ 9 NanoCPUs values
legacy_nano_cpus: false
"""
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(sample_config)
    console.print(f"[bold green]Sample configuration written to {output}[/]")


def _show_images_table(result: list[ImageSummary]) -> None:
    table = Table(title="Images")
    table.add_column("Id", style="cyan")
    table.add_column("Tags", style="white")
    table.add_column("Size (MB)", style="green", justify="right")

    for image in result:
        size = f"{image.size / (1024 * 1024):.1f}" if image.size else "N/A"
        table.add_row(image.id.removeprefix("sha256:")[:12], ", ".join(image.repo_tags or []), size)

    console.print(table)


def _show_details(details: ContainerDetails) -> None:
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("Field", style="dim")
    table.add_column("Value", style="bold")

    table.add_row("Id", details.id[:12])
    table.add_row("Name", details.name.lstrip("/"))
    table.add_row("Image", details.image)
    table.add_row("Status", details.state.status)
    table.add_row("Running", str(details.state.running))
    table.add_row("Exit Code", str(details.state.exit_code))
    if details.state.oom_killed:
        table.add_row("OOM Killed", "[red]yes[/]")

    console.print(table)


def _show_stats(ref: str, snapshot: ContainerStats) -> None:
    table = Table(title=f"Stats for {ref}")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="white", justify="right")

    table.add_row("CPU", f"{snapshot.cpu_percent:.1f}%")
    table.add_row("Memory", f"{snapshot.memory_usage_bytes / (1024 * 1024):.1f} MB")
    table.add_row("Memory Limit", f"{snapshot.memory_limit_bytes / (1024 * 1024):.1f} MB")
    table.add_row("Memory %", f"{snapshot.memory_percent:.1f}%")
    table.add_row("PIDs", str(snapshot.pids))

    console.print(table)


if __name__ == "__main__":
    app()
