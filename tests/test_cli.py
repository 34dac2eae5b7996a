"""
Tests for CLI
=============
Tests for the genpass command line in genpass/cli.py.
"""

import pytest
import sys
import subprocess
from io import StringIO
from pathlib import Path

from rich.console import Console

# Ensure repo root is on path
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from genpass import __version__
from genpass.cli import main
from genpass.charset import ALPHANUMERIC_CHARS
from genpass.entropy import EntropySource
from genpass.generator import CryptoGenerator
from genpass.stats import GeneratorStats, render_stats, throughput


def run_cli(*args):
    return subprocess.run(
        [sys.executable, "-m", "genpass", *args],
        capture_output=True,
        text=True,
        cwd=str(ROOT),
        timeout=60,
    )


class TestCLIBasic:
    """Basic CLI tests."""

    def test_version_flag(self):
        result = run_cli("--version")
        assert result.returncode == 0
        assert f"genpass {__version__}" in result.stdout

    def test_help_flag(self):
        result = run_cli("--help")
        assert result.returncode == 0
        assert "--count" in result.stdout
        assert "hyphenated" in result.stdout

    def test_default_hyphenated(self):
        result = run_cli()
        assert result.returncode == 0
        lines = result.stdout.splitlines()
        assert len(lines) == 1
        assert len(lines[0]) == 20
        assert lines[0][6] == lines[0][13] == "-"


class TestCLIGenerate:
    """Tests for generation flags."""

    def test_compact_batch(self):
        result = run_cli("-t", "compact", "-l", "10", "-c", "5")
        assert result.returncode == 0
        lines = result.stdout.splitlines()
        assert len(lines) == 5
        assert all(len(line) == 10 for line in lines)
        assert all(c in ALPHANUMERIC_CHARS for line in lines for c in line)
        assert len(set(lines)) == 5

    def test_custom_charset(self):
        result = run_cli("-t", "c", "-l", "30", "-s", "ab")
        assert result.returncode == 0
        assert set(result.stdout.strip()) <= set("ab")

    def test_stream(self):
        result = run_cli("-t", "c", "-l", "8", "-c", "4", "--stream")
        assert result.returncode == 0
        assert len(result.stdout.splitlines()) == 4

    def test_sequential(self):
        result = run_cli("-t", "c", "-c", "3", "--no-parallel", "-w", "1")
        assert result.returncode == 0
        assert len(result.stdout.splitlines()) == 3

    def test_verbose_logs_to_stderr(self):
        result = run_cli("-t", "c", "-l", "9", "-c", "2", "-v")
        assert result.returncode == 0
        assert len(result.stdout.splitlines()) == 2
        assert "string(s) of length 9" in result.stderr

    def test_stats_go_to_stderr(self):
        result = run_cli("-c", "2", "--stats")
        assert result.returncode == 0
        assert len(result.stdout.splitlines()) == 2
        assert "Total Generated" in result.stderr


class TestCLIErrors:
    """Invalid input exits non-zero without output."""

    @pytest.mark.parametrize("args", [
        ("-t", "compact", "-l", "0"),
        ("-t", "compact", "-l", "-3"),
        ("-c", "0"),
        ("-c", "1001"),
        ("-s", ""),
        ("-t", "bogus"),
        ("--timeout", "-1"),
    ])
    def test_invalid(self, args):
        result = run_cli(*args)
        assert result.returncode == 1
        assert result.stdout == ""
        assert "Error:" in result.stderr


class TestCLIInProcess:
    """main() called directly."""

    def test_main_returns_zero(self, capsys):
        assert main(["-t", "compact", "-l", "12", "-c", "3"]) == 0
        lines = capsys.readouterr().out.splitlines()
        assert len(lines) == 3
        assert all(len(line) == 12 for line in lines)

    def test_main_invalid(self, capsys):
        assert main(["-s", ""]) == 1
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "invalid configuration" in captured.err

    def test_main_generation_failure(self, capsys, monkeypatch):
        def broken(n):
            raise OSError("no entropy")

        monkeypatch.setattr(
            "genpass.cli.CryptoGenerator",
            lambda: CryptoGenerator(entropy=EntropySource(reader=broken)),
        )
        assert main(["-c", "3"]) == 1
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "generation failed" in captured.err


class TestStatsRendering:
    """Tests for the statistics block."""

    def test_render(self):
        buf = StringIO()
        console = Console(file=buf, width=100)
        stats = GeneratorStats(generated=5, errors=0, avg_duration=0.002,
                               entropy_bytes=400, workers_capacity=32)
        render_stats(stats, elapsed=0.5, count=5, console=console)
        text = buf.getvalue()
        assert "Total Generated" in text
        assert "5 strings" in text
        assert "400 bytes" in text
        assert "10.00 strings/sec" in text

    def test_throughput(self):
        assert throughput(10, 2.0) == 5.0
        assert throughput(10, 0) == 0.0
