"""Main entry point for the Scale Climber CLI."""

import sys
from typing import Optional

import click

from ..logger import get_logger
from ..logging_config import setup_logging
from ..note_types import PollResult
from ..scales import DEFAULT_BASE_OCTAVE, KEY_OFFSETS, generate_scale_data
from ..session import ScaleClimberSession
from ..core.config import ConfigManager

logger = get_logger(__name__)


def _validate_key(_ctx, _param, value: Optional[str]) -> Optional[str]:
    if value is not None and value not in KEY_OFFSETS:
        raise click.BadParameter(
            f"'{value}' is not a key. Choose from {', '.join(KEY_OFFSETS)}"
        )
    return value


def format_result(result: PollResult, elapsed: float) -> str:
    """One console line for a poll result."""
    frequency = f"{result.frequency:7.1f}Hz" if result.frequency else "     ---  "
    if result.position is not None:
        position = f"{result.position:5.2f}"
    elif result.render_position is not None:
        position = " rest"
    else:
        position = "  ---"
    return f"[{elapsed:6.2f}s] {frequency}  pos {position}  {result.label or '-'}"


key_option = click.option(
    "--key", "-k", default=None, callback=_validate_key, help="Root key of the scale"
)
octave_option = click.option(
    "--octave", type=int, default=None, help="Octave of Do in the low register"
)


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option(
    "--config-dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Directory for configuration files (default: ~/.config/scale_climber)",
)
@click.pass_context
def cli(ctx, debug, config_dir):
    """Scale Climber - sing up and down the major scale"""
    setup_logging(level="DEBUG" if debug else "INFO")
    ctx.obj = ConfigManager(config_dir)


def _build_session(config: ConfigManager, audio_input, **overrides) -> ScaleClimberSession:
    try:
        return ScaleClimberSession.from_config(config, audio_input, **overrides)
    except (ValueError, TypeError) as e:
        logger.error(f"Invalid configuration in {config.config_dir}: {e}")
        raise click.ClickException(
            f"Invalid configuration in {config.config_dir}: {e}"
        ) from e


def _microphone_session(config: ConfigManager, device, key, octave):
    from ..audio.audio_input import SoundDeviceInput

    audio_config = config.get_config("audio_input")
    if device is not None:
        audio_config["device_id"] = device
    audio_input = SoundDeviceInput(**audio_config)
    return _build_session(config, audio_input, root_key=key, base_octave=octave)


@cli.command()
@click.option("--duration", "-t", type=float, default=None, help="Seconds to listen")
@click.option("--device", type=int, default=None, help="Audio input device ID")
@key_option
@octave_option
@click.pass_obj
def listen(config, duration, device, key, octave):
    """Print the scale position and note while you sing"""
    session = _microphone_session(config, device, key, octave)
    scale = session.scale_data
    click.echo(f"Listening in {scale.root_key} major. Press Ctrl+C to stop.")

    started_at = []

    def on_result(result: PollResult):
        if not started_at:
            started_at.append(result.timestamp)
        click.echo(format_result(result, result.timestamp - started_at[0]))

    session.events.on_position_updated(on_result)
    if not session.start():
        click.echo("Error: could not open the microphone.", err=True)
        sys.exit(1)

    try:
        session.run(duration)
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
    finally:
        session.stop()


@cli.command()
@click.option("--device", type=int, default=None, help="Audio input device ID")
@key_option
@octave_option
@click.pass_obj
def tower(config, device, key, octave):
    """Open the tower window"""
    from ..ui import PygameTowerUI

    session = _microphone_session(config, device, key, octave)
    PygameTowerUI(session).run()


@cli.command()
@click.argument("file_path", type=click.Path(exists=True, dir_okay=False))
@click.option("--hop", type=int, default=None, help="Samples between frames")
@click.option("--gain", type=float, default=1.0, help="Gain applied to the file")
@key_option
@octave_option
@click.pass_obj
def analyze(config, file_path, hop, gain, key, octave):
    """Run the tracker over a sound file, one line per frame"""
    from ..audio.file_input import WavFileInput

    frame_size = config.get_config("audio_input")["frame_size"]
    audio_input = WavFileInput(file_path, frame_size=frame_size, hop_size=hop, gain=gain)

    def file_clock() -> float:
        # Seconds of audio consumed so far
        rate = audio_input.sample_rate
        return audio_input.position / rate if rate else 0.0

    session = _build_session(
        config, audio_input, root_key=key, base_octave=octave, clock=file_clock
    )
    if not session.start():
        click.echo(f"Error: could not read {file_path}", err=True)
        sys.exit(1)

    try:
        while not audio_input.exhausted:
            result = session.poll()
            click.echo(format_result(result, result.timestamp))
    finally:
        session.stop()


@cli.command()
def devices():
    """List audio input devices and the sample rates they accept"""
    from ..audio.audio_input import describe_input_devices

    found = describe_input_devices()
    if not found:
        click.echo("No input devices found.")
        return
    for device in found:
        click.echo(f"Device {device['id']}: {device['name']}")
        click.echo(f"  Max input channels: {device['max_input_channels']}")
        click.echo(f"  Default sample rate: {device['default_samplerate']} Hz")
        rates = ", ".join(str(rate) for rate in device["supported_rates"]) or "none"
        click.echo(f"  Supported rates: {rates}")


@cli.command()
@key_option
@octave_option
def scale(key, octave):
    """Print the tones of both registers"""
    data = generate_scale_data(
        key or "C", DEFAULT_BASE_OCTAVE if octave is None else octave
    )
    click.echo(f"{data.root_key} major, base octave {data.base_octave}")
    for level, low, high in zip(data.levels, data.low, data.high):
        click.echo(
            f"  {low.index}  {level.solfege:<3} {low.frequency:8.2f}Hz  {high.frequency:8.2f}Hz"
        )


if __name__ == "__main__":
    cli()
