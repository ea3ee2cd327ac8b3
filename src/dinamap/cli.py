"""
Command-line interface for dinamap.

Provides commands for decoding Dinamap block files and managing decoder
configuration.
"""

import logging

from contextlib import ExitStack
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as get_version
from pathlib import Path

import click

from dinamap.analysis.service import DecodingService
from dinamap.config import (
    DECODER_SECTION,
    get_config_path,
    get_decoder_settings,
    load_config,
    set_decoder_option,
    unset_decoder_option,
)
from dinamap.constants import DEFAULT_PLOT_HEIGHT, DEFAULT_PLOT_WIDTH, DecodePolicy
from dinamap.logging_config import setup_logging
from dinamap.parsers.base import SinkWriteError, SourceReadError
from dinamap.waveform.renderer import AsciiWaveformRenderer
from dinamap.waveform.sinks import (
    FileWaveformSink,
    MemoryWaveformSink,
    TeeWaveformSink,
    WaveformSink,
)

logger = logging.getLogger(__name__)

CONSOLE_FORMAT = "%(levelname)s: %(message)s"

try:
    __version__ = get_version("dinamap-reader")
except PackageNotFoundError:
    __version__ = "dev"


@click.group()
@click.version_option(__version__, prog_name="dinamap")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """dinamap: Dinamap Pro 1000 binary block reader"""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    setup_logging(verbose=verbose, console_format=CONSOLE_FORMAT)


@cli.command()
@click.argument("input_file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--policy",
    type=click.Choice([p.value for p in DecodePolicy]),
    help="How to handle a field that is not valid hex (default: from config, else strict)",
)
@click.option(
    "--channel",
    type=click.IntRange(1, 2),
    help="Waveform channel to unpack (default: from config, else 2)",
)
@click.option(
    "--debug", "-d", type=int, default=0, help="Debug level; > 0 dumps every block"
)
@click.option(
    "--waveform-out",
    "-o",
    type=click.Path(dir_okay=False, writable=True),
    help="Write waveform samples to this file, one per line",
)
@click.option("--plot/--no-plot", default=False, help="Render the waveform in the terminal")
@click.option("--width", type=int, default=DEFAULT_PLOT_WIDTH, help="Plot width")
@click.option("--height", type=int, default=DEFAULT_PLOT_HEIGHT, help="Plot height")
@click.pass_context
def decode(
    ctx: click.Context,
    input_file: str,
    policy: str | None,
    channel: int | None,
    debug: int,
    waveform_out: str | None,
    plot: bool,
    width: int,
    height: int,
) -> None:
    """Decode a Dinamap block file and report events and alarms."""
    if debug > 0:
        setup_logging(
            verbose=ctx.obj.get("verbose", False),
            console_format=CONSOLE_FORMAT,
            debug_level=debug,
        )

    try:
        settings = get_decoder_settings(policy=policy, channel=channel)
    except ValueError as e:
        raise click.BadParameter(str(e)) from e

    memory_sink = MemoryWaveformSink() if plot else None

    with ExitStack() as stack:
        sinks: list[WaveformSink] = []
        if waveform_out:
            try:
                out = stack.enter_context(open(waveform_out, "w", encoding="ascii"))
            except OSError as e:
                raise click.ClickException(f"Cannot open {waveform_out}: {e}") from e
            sinks.append(FileWaveformSink(out))
        if memory_sink is not None:
            sinks.append(memory_sink)

        service = DecodingService(
            settings=settings,
            waveform_sink=TeeWaveformSink(*sinks) if sinks else None,
            debug=debug,
        )

        try:
            result = service.decode_file(input_file)
        except (SourceReadError, SinkWriteError) as e:
            raise click.ClickException(str(e)) from e

    for line in result.counters.summary_lines():
        click.echo(line)
    if result.malformed_blocks:
        click.echo(f"{result.malformed_blocks} malformed blocks ignored")
    if waveform_out:
        click.echo(f"Wrote {result.samples_written} samples to {waveform_out}")

    if memory_sink is not None:
        try:
            renderer = AsciiWaveformRenderer(width=width, height=height)
        except ValueError as e:
            raise click.BadParameter(str(e)) from e
        click.echo("")
        click.echo(
            renderer.render(
                memory_sink.to_array(),
                counters=result.counters,
                title=f"{Path(input_file).name} - channel {settings.channel}",
            )
        )


@cli.group()
def config() -> None:
    """Configuration management commands."""
    pass


@config.command("show")
def show_config_cmd() -> None:
    """Show all configuration settings."""
    config_path = get_config_path()
    if not config_path.exists():
        click.echo(f"No config file: {config_path}")
    else:
        click.echo(f"Config file: {config_path}\n")

    settings = get_decoder_settings()
    click.echo("Effective decoder settings:")
    click.echo(f"  policy = {settings.policy.value}")
    click.echo(f"  channel = {settings.channel}")
    click.echo(f"  min_block_length = {settings.min_block_length}")

    config_data = load_config()
    for section, values in config_data.items():
        if section == DECODER_SECTION or not isinstance(values, dict):
            continue
        click.echo(f"\n  [{section}]")
        for key, value in values.items():
            click.echo(f"    {key} = {value!r}")


@config.command("set")
@click.argument("key")
@click.argument("value")
def set_config_cmd(key: str, value: str) -> None:
    """Set a decoder option (policy, channel, min_block_length)."""
    try:
        set_decoder_option(key, value)
    except KeyError:
        raise click.ClickException(f"Unknown decoder option: {key}") from None
    except (ValueError, PermissionError) as e:
        raise click.ClickException(str(e)) from e
    click.echo(f"✓ Set {key} = {value}")


@config.command("unset")
@click.argument("key")
def unset_config_cmd(key: str) -> None:
    """Remove a decoder option, restoring its default."""
    section = load_config().get(DECODER_SECTION, {})
    if key not in section:
        click.echo(f"{key} was not configured.")
        return
    unset_decoder_option(key)
    click.echo(f"✓ Removed {key}")
