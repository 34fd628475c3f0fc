"""Tests for running external tools as child processes."""
import asyncio

import pytest

from conftest import write_script
from musicdl_cli.exceptions import ToolNotInstalledError
from musicdl_cli.tools.process import run_tool


async def test_captures_output_and_status(tmp_path):
    script = write_script(
        tmp_path / "echo",
        "import sys\nprint('out')\nsys.stderr.write('err')\nsys.exit(2)\n",
    )
    result = await run_tool([str(script)])

    assert result.returncode == 2
    assert not result.ok
    assert result.stdout.strip() == "out"
    assert result.error_summary() == "err"


async def test_success(tmp_path):
    script = write_script(tmp_path / "ok", "print('fine')\n")
    result = await run_tool([str(script), "--flag"])
    assert result.ok
    assert result.args == (str(script), "--flag")


async def test_missing_binary(tmp_path):
    with pytest.raises(ToolNotInstalledError):
        await run_tool([str(tmp_path / "missing")])


async def test_timeout_kills_process(tmp_path):
    script = write_script(tmp_path / "slow", "import time\ntime.sleep(30)\n")
    with pytest.raises(asyncio.TimeoutError):
        await run_tool([str(script)], timeout=0.5)


async def test_cancellation_propagates(tmp_path):
    script = write_script(tmp_path / "slow", "import time\ntime.sleep(30)\n")
    task = asyncio.create_task(run_tool([str(script)]))
    await asyncio.sleep(0.3)
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task


def test_error_summary_without_output():
    from musicdl_cli.tools.process import ProcessResult

    result = ProcessResult(args=("x",), returncode=1, stdout="", stderr="  ")
    assert result.error_summary() == "exited with code 1"
