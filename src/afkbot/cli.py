from __future__ import annotations

import asyncio
import contextlib
import json
import signal
from pathlib import Path

import click
import structlog

from afkbot.client import load_client
from afkbot.config import BotConfig, load_config
from afkbot.core.supervisor import Supervisor
from afkbot.errors import AfkBotError
from afkbot.logging import configure_logging
from afkbot.settings import Settings

log = structlog.get_logger()

config_option = click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="JSON or YAML config file. Defaults to config.json in the working or user config directory.",
)


def _load(settings: Settings, config_path: Path | None) -> BotConfig:
    try:
        return load_config(config_path or settings.config_path)
    except AfkBotError as e:
        raise click.ClickException(str(e)) from e


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="afkbot")
def cli() -> None:
    """afkbot command line interface."""


@cli.command("run")
@config_option
@click.option("--log-level", default=None, help="Override AFKBOT_LOG_LEVEL.")
def run(config_path: Path | None, log_level: str | None) -> None:
    """Connect and stay connected until interrupted."""
    settings = Settings()
    configure_logging(settings, level=log_level)
    config = _load(settings, config_path)
    try:
        client = load_client(config.client.driver)
    except AfkBotError as e:
        raise click.ClickException(str(e)) from e

    asyncio.run(_run_supervisor(config, Supervisor(config, client)))


async def _run_supervisor(config: BotConfig, supervisor: Supervisor) -> None:
    loop = asyncio.get_running_loop()
    stop = asyncio.Event()
    for sig in (signal.SIGINT, signal.SIGTERM):
        with contextlib.suppress(NotImplementedError):
            loop.add_signal_handler(sig, stop.set)

    log.info("afkbot_starting", host=config.client.host, port=config.client.port, username=config.client.username)
    runner = asyncio.create_task(supervisor.run())
    try:
        await stop.wait()
    finally:
        log.info("afkbot_stopping")
        await supervisor.close()
        await runner


@cli.command("probe")
@config_option
def probe(config_path: Path | None) -> None:
    """Check once whether the configured server answers."""
    settings = Settings()
    configure_logging(settings)
    config = _load(settings, config_path)
    client_cfg = config.client
    try:
        client = load_client(client_cfg.driver)
        asyncio.run(client.probe(client_cfg.host, client_cfg.port, client_cfg.probe_timeout_s))
    except Exception as e:
        raise click.ClickException(f"{client_cfg.host}:{client_cfg.port} unreachable: {e}") from e
    click.echo(f"{client_cfg.host}:{client_cfg.port} reachable")


@cli.command("config")
@config_option
def show_config(config_path: Path | None) -> None:
    """Print the resolved configuration."""
    settings = Settings()
    configure_logging(settings)
    config = _load(settings, config_path)
    click.echo(json.dumps(config.to_dict(), indent=2))


def main() -> None:
    cli.main()


if __name__ == "__main__":
    main()
