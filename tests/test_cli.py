# =============================================================================
# test_cli.py - Command-Line Interface Tests
# =============================================================================
# Tests for the r16asm command and its exit codes.
# =============================================================================

import os
import stat

import pytest
from click.testing import CliRunner
from r16asm.cli.errors import ExitCode, handle_cli_exception
from r16asm.cli.r16asm import main


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def source(tmp_path):
    path = tmp_path / "prog.asm"
    path.write_text("ORG 0X0\nADD R1, R2, R3\n")
    return path


class TestCliSuccess:
    """Successful runs."""

    def test_assembles(self, runner, source, tmp_path):
        output = tmp_path / "prog.hex"
        result = runner.invoke(main, [str(source), str(output)])

        assert result.exit_code == ExitCode.SUCCESS
        lines = output.read_text().splitlines()
        assert len(lines) == 512
        assert lines[0] == "0253"

    def test_replaces_existing_output(self, runner, source, tmp_path):
        output = tmp_path / "prog.hex"
        output.write_text("stale\n")
        result = runner.invoke(main, [str(source), str(output)])

        assert result.exit_code == 0
        assert output.read_text().startswith("0253\n")

    def test_help(self, runner):
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        assert "Assemble R16 source code" in result.output

    def test_version(self, runner):
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert "r16asm" in result.output
        assert "1.0.0" in result.output


class TestCliErrors:
    """Failures exit non-zero and never leave a partial ROM."""

    def test_no_arguments(self, runner):
        result = runner.invoke(main, [])
        assert result.exit_code == ExitCode.INVALID_ARGS
        assert "Usage" in result.output

    def test_one_argument(self, runner, source):
        result = runner.invoke(main, [str(source)])
        assert result.exit_code == ExitCode.INVALID_ARGS

    def test_three_arguments(self, runner, source, tmp_path):
        result = runner.invoke(main, [str(source), str(tmp_path / "a"), str(tmp_path / "b")])
        assert result.exit_code == ExitCode.INVALID_ARGS

    def test_missing_input(self, runner, tmp_path):
        output = tmp_path / "out.hex"
        result = runner.invoke(main, [str(tmp_path / "missing.asm"), str(output)])
        assert result.exit_code == ExitCode.INVALID_ARGS
        assert not output.exists()

    def test_assembly_error(self, runner, tmp_path):
        bad = tmp_path / "bad.asm"
        bad.write_text("NOP\nADD R1, R2\n")
        output = tmp_path / "out.hex"
        result = runner.invoke(main, [str(bad), str(output)])

        assert result.exit_code == ExitCode.BUILD_ERROR
        assert "Assembly error" in result.output
        assert ":2:1: error:" in result.output
        assert not output.exists()

    def test_assembly_error_keeps_old_output(self, runner, tmp_path):
        bad = tmp_path / "bad.asm"
        bad.write_text("BRR NOWHERE\n")
        output = tmp_path / "out.hex"
        output.write_text("previous\n")
        result = runner.invoke(main, [str(bad), str(output)])

        assert result.exit_code == ExitCode.BUILD_ERROR
        assert output.read_text() == "previous\n"

    def test_bad_log_level(self, runner, source, tmp_path):
        result = runner.invoke(
            main,
            [str(source), str(tmp_path / "out.hex")],
            env={"R16ASM_LOG_LEVEL": "LOUD"},
        )
        assert result.exit_code == ExitCode.INVALID_ARGS
        assert "unknown log level" in result.output

    def test_label_capacity_from_env(self, runner, tmp_path):
        prog = tmp_path / "labels.asm"
        prog.write_text("A:\nB:\nNOP\n")
        result = runner.invoke(
            main,
            [str(prog), str(tmp_path / "out.hex")],
            env={"R16ASM_MAX_LABELS": "1"},
        )
        assert result.exit_code == ExitCode.BUILD_ERROR
        assert "too many labels" in result.output

    def test_missing_output_directory(self, runner, source, tmp_path):
        output = tmp_path / "no" / "such" / "dir" / "out.hex"
        result = runner.invoke(main, [str(source), str(output)])
        assert result.exit_code == ExitCode.INVALID_ARGS
        assert "Error:" in result.output
        assert "Internal error" not in result.output


class TestCliOutputFile:
    """The ROM file is written like any other tool output."""

    @pytest.mark.skipif(os.name != "posix", reason="POSIX permission bits")
    def test_output_mode_follows_umask(self, runner, source, tmp_path):
        output = tmp_path / "prog.hex"
        old = os.umask(0o022)
        try:
            result = runner.invoke(main, [str(source), str(output)])
        finally:
            os.umask(old)

        assert result.exit_code == 0
        assert stat.S_IMODE(output.stat().st_mode) == 0o644


class TestHandleCliException:
    """Exit codes chosen by handle_cli_exception()."""

    def test_os_error(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            handle_cli_exception(PermissionError("denied"))
        assert exc_info.value.code == ExitCode.INVALID_ARGS
        assert "Error: denied" in capsys.readouterr().err

    def test_unexpected_error(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            handle_cli_exception(RuntimeError("boom"))
        assert exc_info.value.code == ExitCode.INTERNAL_ERROR
        assert "Internal error: boom" in capsys.readouterr().err
