"""Supervision of a single external Java process.

Each ilitools invocation runs as a subprocess in its own session, so the
JVM and anything it forks share one process group. Cancellation kills that
group as a whole.

No exceptions escape for expected failures; the caller always gets a
ProcessResult. Cancelled and crashed runs both report
PROCESS_FAILED_EXIT_CODE, and callers treat them alike.
"""

import asyncio
import logging
import os
import signal
import sys
import time
from typing import Optional, Sequence

from ilicop.ilitools.commands import pretty_print_command
from ilicop.ilitools.types import ProcessResult

logger = logging.getLogger(__name__)


def _kill_process_tree(process: asyncio.subprocess.Process) -> None:
    """Kill the process and every descendant in its process group.

    The group is signalled even when the direct child has already exited:
    its pid stays the group id while any descendant is still alive.
    """
    try:
        if sys.platform == "win32":
            if process.returncode is None:
                process.kill()
        else:
            os.killpg(process.pid, signal.SIGKILL)
    except ProcessLookupError:
        pass


async def _drain_and_wait(process: asyncio.subprocess.Process) -> bytes:
    """Read stderr to EOF, then reap the process.

    EOF only arrives once every descendant holding the pipe is gone.
    """
    stderr = await process.stderr.read()
    await process.wait()
    return stderr


def _truncate_output(text: str, max_lines: int = 60, max_chars: int = 4000) -> str:
    """Return a concise tail of command output for logs."""
    if not text:
        return ""
    tail = "\n".join(text.splitlines()[-max_lines:])
    if len(tail) > max_chars:
        tail = tail[-max_chars:]
    return tail


async def run_java_command(
    java_executable: str,
    command: Sequence[str],
    cancel_event: Optional[asyncio.Event] = None,
    context: str = "",
) -> ProcessResult:
    """Run `java_executable *command` and wait for it to exit.

    stderr is captured and logged at DEBUG; stdout is discarded.
    Setting `cancel_event` while the process runs kills the process tree
    and yields a failed result. If the process has already exited, the
    event is ignored.

    `context` (usually the transfer file name) is added to failure logs.
    """
    logger.info("Executing command: %s %s", java_executable, pretty_print_command(command))
    start = time.monotonic()

    try:
        process = await asyncio.create_subprocess_exec(
            java_executable,
            *command,
            stdout=asyncio.subprocess.DEVNULL,
            stderr=asyncio.subprocess.PIPE,
            start_new_session=True,
        )
    except (OSError, ValueError) as exc:
        logger.error("Failed to start %s for %s: %s", java_executable, context, exc)
        return ProcessResult.failed(str(exc))

    output_task = asyncio.ensure_future(_drain_and_wait(process))
    cancel_task = asyncio.ensure_future(cancel_event.wait()) if cancel_event else None
    waiters = {output_task} | ({cancel_task} if cancel_task else set())

    try:
        done, _ = await asyncio.wait(waiters, return_when=asyncio.FIRST_COMPLETED)

        if output_task not in done:
            logger.warning("Cancellation requested, killing process tree of %s", context)
            _kill_process_tree(process)
            await output_task
            return ProcessResult.failed("cancelled")

        stderr = output_task.result().decode("utf-8", errors="replace")
        if stderr:
            logger.debug("stderr of %s:\n%s", context, _truncate_output(stderr))

        logger.info(
            "Process for %s exited with code %d (%.1fs)",
            context, process.returncode, time.monotonic() - start,
        )
        return ProcessResult(exit_code=process.returncode)

    except asyncio.CancelledError:
        _kill_process_tree(process)
        raise
    except Exception as exc:
        logger.exception("Failed to execute %s for %s", java_executable, context)
        _kill_process_tree(process)
        return ProcessResult.failed(str(exc))
    finally:
        for task in (output_task, cancel_task):
            if task is not None and not task.done():
                task.cancel()
