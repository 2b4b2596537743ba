import numpy as np
import soundfile as sf
from click.testing import CliRunner

from scale_climber.cli.main import cli, format_result
from scale_climber.note_types import PollResult


def test_scale_lists_both_registers(tmp_path):
    runner = CliRunner()
    result = runner.invoke(cli, ["--config-dir", str(tmp_path), "scale", "--key", "G"])
    assert result.exit_code == 0
    assert "G major, base octave 3" in result.output
    assert "196.00Hz" in result.output
    assert "392.00Hz" in result.output
    assert "Do" in result.output


def test_unknown_key_is_rejected(tmp_path):
    runner = CliRunner()
    result = runner.invoke(cli, ["--config-dir", str(tmp_path), "scale", "--key", "H"])
    assert result.exit_code != 0
    assert "is not a key" in result.output


def test_analyze_prints_a_line_per_frame(tmp_path):
    sample_rate = 44100
    t = np.arange(sample_rate // 2) / sample_rate
    path = tmp_path / "a4.wav"
    sf.write(str(path), 0.5 * np.sin(2 * np.pi * 440.0 * t), sample_rate)

    runner = CliRunner()
    result = runner.invoke(
        cli, ["--config-dir", str(tmp_path / "config"), "analyze", str(path)]
    )
    assert result.exit_code == 0
    lines = [line for line in result.output.splitlines() if line.startswith("[")]
    assert len(lines) == (sample_rate // 2) // 2048
    assert all(line.endswith("A4") for line in lines)


def test_format_result():
    line = format_result(PollResult(440.0, 5.0, 5.0, "A4"), 1.5)
    assert line == "[  1.50s]   440.0Hz  pos  5.00  A4"

    rest = format_result(PollResult(None, None, -0.5, ""), 0.0)
    assert "---" in rest
    assert "rest" in rest
    assert rest.endswith("-")


def test_bad_configured_key_is_reported(tmp_path):
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    (config_dir / "session.json").write_text('{"root_key": "H"}')
    path = tmp_path / "a4.wav"
    sf.write(str(path), np.zeros(4096), 44100)

    runner = CliRunner()
    result = runner.invoke(cli, ["--config-dir", str(config_dir), "analyze", str(path)])
    assert result.exit_code == 1
    assert isinstance(result.exception, SystemExit)
    assert "Invalid configuration" in result.output
    assert "Unknown key 'H'" in result.output
