"""Tests for run_java_command.

The Python interpreter stands in for the Java runtime, so these tests
spawn real (short-lived) processes without needing a JDK.
"""

import asyncio
import logging
import sys
import time
from unittest.mock import AsyncMock, patch

import pytest

from ilicop.ilitools.process import run_java_command
from ilicop.ilitools.types import PROCESS_FAILED_EXIT_CODE


class TestRunJavaCommand:
    @pytest.mark.asyncio
    async def test_returns_exit_code(self):
        result = await run_java_command(sys.executable, ["-c", "import sys; sys.exit(3)"])

        assert result.exit_code == 3
        assert result.is_success is False
        assert result.error is None

    @pytest.mark.asyncio
    async def test_success(self):
        result = await run_java_command(sys.executable, ["-c", "pass"], asyncio.Event())
        assert result.is_success is True

    @pytest.mark.asyncio
    async def test_stderr_logged_at_debug(self, caplog):
        caplog.set_level(logging.DEBUG, logger="ilicop.ilitools.process")

        await run_java_command(
            sys.executable,
            ["-c", "import sys; sys.stderr.write('model not found')"],
            context="lines.xtf",
        )

        debug_messages = [r.getMessage() for r in caplog.records if r.levelno == logging.DEBUG]
        assert any("model not found" in m for m in debug_messages)

    @pytest.mark.asyncio
    async def test_missing_executable_returns_sentinel(self):
        result = await run_java_command("/nonexistent/java", ["-jar", "tool.jar"], context="lines.xtf")

        assert result.exit_code == PROCESS_FAILED_EXIT_CODE
        assert result.error

    @pytest.mark.asyncio
    async def test_cancellation_kills_process(self):
        cancel_event = asyncio.Event()
        loop = asyncio.get_running_loop()
        loop.call_later(0.3, cancel_event.set)

        start = time.monotonic()
        result = await asyncio.wait_for(
            run_java_command(sys.executable, ["-c", "import time; time.sleep(30)"], cancel_event),
            timeout=10,
        )

        assert result.exit_code == PROCESS_FAILED_EXIT_CODE
        assert result.error == "cancelled"
        assert time.monotonic() - start < 10

    @pytest.mark.asyncio
    async def test_cancel_after_exit_is_noop(self):
        cancel_event = asyncio.Event()
        result = await run_java_command(sys.executable, ["-c", "pass"], cancel_event)
        cancel_event.set()

        assert result.exit_code == 0

    @pytest.mark.asyncio
    async def test_spawns_in_new_session(self):
        spawn = AsyncMock(side_effect=OSError("spawn failed"))
        with patch("ilicop.ilitools.process.asyncio.create_subprocess_exec", spawn):
            result = await run_java_command("java", ["-jar", "tool.jar", "--verbose"])

        assert result.exit_code == PROCESS_FAILED_EXIT_CODE
        assert "spawn failed" in result.error
        args, kwargs = spawn.call_args
        assert args == ("java", "-jar", "tool.jar", "--verbose")
        assert kwargs["start_new_session"] is True
        assert kwargs["stderr"] == asyncio.subprocess.PIPE

    @pytest.mark.asyncio
    @pytest.mark.skipif(sys.platform == "win32", reason="process groups are POSIX only")
    async def test_cancellation_kills_descendants(self, tmp_path):
        # The child exits at once; the grandchild keeps the stderr pipe open.
        pid_file = tmp_path / "grandchild.pid"
        script = (
            "import subprocess, sys\n"
            "p = subprocess.Popen([sys.executable, '-c', 'import time; time.sleep(30)'])\n"
            f"open({str(pid_file)!r}, 'w').write(str(p.pid))\n"
        )
        cancel_event = asyncio.Event()

        async def cancel_once_grandchild_started():
            while not pid_file.exists():
                await asyncio.sleep(0.05)
            await asyncio.sleep(0.2)
            cancel_event.set()

        canceller = asyncio.ensure_future(cancel_once_grandchild_started())
        start = time.monotonic()
        result = await asyncio.wait_for(
            run_java_command(sys.executable, ["-c", script], cancel_event),
            timeout=10,
        )
        await canceller

        assert result.error == "cancelled"
        assert result.exit_code == PROCESS_FAILED_EXIT_CODE
        assert time.monotonic() - start < 10
