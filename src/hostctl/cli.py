from __future__ import annotations

import difflib
import logging
from functools import wraps
from pathlib import Path
from typing import Optional

import click
from rich.markup import escape

from .cli_helpers.display import (
    console,
    display_diff,
    display_entries,
    display_environment,
    display_environments,
    display_error,
    display_info,
    display_success,
    display_warning,
)
from .exceptions import (
    HostctlError,
    HostctlNotFoundError,
    HostctlValidationError,
    format_error_message,
)
from .hosts_manager import HostsManager
from .log_config import setup_logging
from .models import Config, Environment
from .settings import DEFAULT_ENV_FILE, Settings
from .storage import ConfigStorage
from .validation import build_entry, is_valid_hostname

__all__ = ["cli"]

logger = logging.getLogger("hostctl")


def _reports_errors(func):
    """Turn hostctl errors into a red console message and exit status 1."""

    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except HostctlError as e:
            logger.debug(f"Command failed: {e.details}")
            display_error(format_error_message(e))
            raise SystemExit(1)

    return wrapper


def _storage(ctx: click.Context) -> ConfigStorage:
    return ctx.obj["storage"]


def _require_environment(config: Config, name: str) -> Environment:
    env = config.get_environment(name)
    if env is None:
        raise HostctlNotFoundError(f"Environment '{name}' not found.", {"environment": name})
    return env


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "--config-dir",
    type=click.Path(file_okay=False, dir_okay=True, path_type=Path),
    default=None,
    help="Directory holding config.yaml (default: ~/.config/hostctl or $HOSTCTL_CONFIG_DIR).",
)
@click.option(
    "--hosts-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Hosts file to manage (default: the system hosts file or $HOSTCTL_HOSTS_FILE).",
)
@click.option(
    "--env-file",
    type=click.Path(dir_okay=False),
    default=DEFAULT_ENV_FILE,
    show_default=True,
    help="Optional dotenv file with HOSTCTL_* settings.",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose logging output.",
)
@click.pass_context
@_reports_errors
def cli(
    ctx: click.Context,
    config_dir: Optional[Path],
    hosts_file: Optional[Path],
    env_file: str,
    verbose: bool,
) -> None:
    """hostctl – switch the hosts file between named environments."""
    settings = Settings.from_env(env_file)
    if config_dir is not None:
        settings.config_dir = config_dir
    if hosts_file is not None:
        settings.hosts_file = hosts_file

    setup_logging(verbose=verbose, log_file=settings.log_file, level=settings.log_level)
    logger.debug(f"Config dir: {settings.config_dir}, hosts file: {settings.hosts_file}")

    ctx.ensure_object(dict)
    ctx.obj["settings"] = settings
    ctx.obj["storage"] = ConfigStorage(settings.config_dir)
    ctx.obj["hosts_manager"] = HostsManager(settings.hosts_file)


@cli.command(name="list")
@click.pass_context
@_reports_errors
def list_environments(ctx: click.Context) -> None:
    """List all configured environments."""
    config = _storage(ctx).load_config()
    if not config.environments:
        console.print("No environments configured.")
        return
    display_environments(config)


@cli.command()
@click.pass_context
@_reports_errors
def current(ctx: click.Context) -> None:
    """Show the currently active environment."""
    config = _storage(ctx).load_config()
    name = config.current_environment
    if name is None:
        console.print("No environment is currently active.")
        return

    env = config.get_environment(name)
    if env is None:
        display_warning(f"Current environment '{name}' not found.")
        return
    display_environment(env, title="Current environment")


@cli.command()
@click.argument("name")
@click.option("--dry-run", is_flag=True, help="Show the resulting hosts file diff without writing it.")
@click.pass_context
@_reports_errors
def switch(ctx: click.Context, name: str, dry_run: bool) -> None:
    """Apply environment NAME to the hosts file and make it current."""
    storage = _storage(ctx)
    hosts_manager: HostsManager = ctx.obj["hosts_manager"]
    config = storage.load_config()
    env = _require_environment(config, name)

    if dry_run:
        current_content, new_content = hosts_manager.render(env)
        diff = list(
            difflib.unified_diff(
                current_content.splitlines(),
                new_content.splitlines(),
                fromfile=f"{hosts_manager.hosts_path} (current)",
                tofile=f"{hosts_manager.hosts_path} (new)",
                lineterm="",
            )
        )
        if not diff:
            display_info("No changes detected (hosts file already up-to-date).")
        else:
            display_diff(diff)
        return

    backup_path = hosts_manager.apply_environment(env)
    config.current_environment = name
    storage.save_config(config)

    console.print(f"[dim]Backup written to {escape(str(backup_path))}[/dim]")
    display_success(f"Switched to environment: {name}")


@cli.command()
@click.argument("name")
@click.pass_context
@_reports_errors
def show(ctx: click.Context, name: str) -> None:
    """Show the entries of environment NAME."""
    config = _storage(ctx).load_config()
    display_environment(_require_environment(config, name))


@cli.command()
@click.argument("name")
@click.option("--description", "-d", default=None, help="Free-form description of the environment.")
@click.pass_context
@_reports_errors
def add(ctx: click.Context, name: str, description: Optional[str]) -> None:
    """Create a new, empty environment NAME."""
    storage = _storage(ctx)
    config = storage.load_config()

    if not is_valid_hostname(name):
        raise HostctlValidationError(f"Invalid environment name: {name}", {"environment": name})
    if config.get_environment(name) is not None:
        raise HostctlValidationError(f"Environment '{name}' already exists.", {"environment": name})

    config.add_environment(Environment(name=name, description=description))
    storage.save_config(config)
    display_success(f"Environment '{name}' created successfully.")


@cli.command()
@click.argument("name")
@click.pass_context
@_reports_errors
def remove(ctx: click.Context, name: str) -> None:
    """Remove environment NAME."""
    storage = _storage(ctx)
    config = storage.load_config()

    if not config.remove_environment(name):
        raise HostctlNotFoundError(f"Environment '{name}' not found.", {"environment": name})

    storage.save_config(config)
    display_success(f"Environment '{name}' removed successfully.")


@cli.command(name="add-entry")
@click.argument("environment")
@click.argument("ip")
@click.argument("hostname")
@click.option("--comment", "-c", default=None, help="Comment written after the entry.")
@click.pass_context
@_reports_errors
def add_entry(
    ctx: click.Context, environment: str, ip: str, hostname: str, comment: Optional[str]
) -> None:
    """Add IP HOSTNAME to ENVIRONMENT."""
    storage = _storage(ctx)
    config = storage.load_config()

    entry = build_entry(ip, hostname, comment)
    env = _require_environment(config, environment)
    env.add_entry(entry)

    storage.save_config(config)
    display_success(f"Entry added to environment '{environment}': {entry.ip} {hostname}")


@cli.command(name="remove-entry")
@click.argument("environment")
@click.argument("hostname")
@click.pass_context
@_reports_errors
def remove_entry(ctx: click.Context, environment: str, hostname: str) -> None:
    """Remove the first HOSTNAME entry from ENVIRONMENT."""
    storage = _storage(ctx)
    config = storage.load_config()
    env = _require_environment(config, environment)

    if not env.remove_entry(hostname):
        raise HostctlNotFoundError(
            f"Entry '{hostname}' not found in environment '{environment}'.",
            {"environment": environment, "hostname": hostname},
        )

    storage.save_config(config)
    display_success(f"Entry removed from environment '{environment}': {hostname}")


@cli.command()
@click.pass_context
@_reports_errors
def hosts(ctx: click.Context) -> None:
    """Show the entries currently in the hosts file."""
    hosts_manager: HostsManager = ctx.obj["hosts_manager"]
    foreign, managed = hosts_manager.read_sections()

    console.print(f"[bold]Hosts file:[/bold] {escape(str(hosts_manager.hosts_path))}")
    console.print("[bold blue]System entries:[/bold blue]")
    display_entries(foreign)
    console.print("[bold blue]Managed entries:[/bold blue]")
    display_entries(managed)
