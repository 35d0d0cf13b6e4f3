"""Bounded asynchronous command execution.

``run_command`` launches one process, feeds it optional input, drains
stdout and stderr concurrently and waits for it under a hard timeout.
Every failure mode comes back in ``CommandResult.status`` instead of being
raised, so callers dispatch on the outcome:

Usage:
    result = await run_command(Command.of("node", "-v"), timeout_ms=5_000)
    match result.status:
        case Succeeded():
            print(result.output)
        case Failed(code=code):
            print(f"exit {code}: {result.stderr}")
        case TimedOut() | LaunchFailed():
            print(describe_failure(result))

No child outlives its call: on timeout (or when the awaiting task is
cancelled) the process, and on POSIX its whole process group, is killed
and reaped before control returns.
"""

from __future__ import annotations

import asyncio
import codecs
import logging
import os
import shlex
import signal
import sys
from collections.abc import Iterable, Mapping
from contextlib import suppress
from dataclasses import dataclass
from pathlib import Path

from rtcheck.core.config import DEFAULT_TIMEOUT_MS
from rtcheck.core.text import tail

__all__ = [
    "Command",
    "CommandOptions",
    "CommandResult",
    "DEFAULT_TIMEOUT_MS",
    "ExitStatus",
    "Failed",
    "LaunchFailed",
    "Succeeded",
    "TimedOut",
    "describe_failure",
    "run_command",
    "shellify",
]

logger = logging.getLogger(__name__)

_CHUNK_SIZE = 4096
# How long to wait for pipes to close once the child has been killed.
_KILL_GRACE_S = 2.0


@dataclass(frozen=True, slots=True)
class Command:
    """An argv vector or a single shell line. Never empty.

    Build with ``Command.of("node", "-v")`` or
    ``Command.shell_line("node -v | head -1")``.
    """

    argv: tuple[str, ...] = ()
    line: str | None = None

    def __post_init__(self) -> None:
        if self.line is not None:
            if self.argv:
                raise ValueError("Command takes argv or a shell line, not both")
            if not self.line.strip():
                raise ValueError("Command shell line is empty")
        elif not self.argv or not self.argv[0]:
            raise ValueError("Command needs at least a program name")

    @classmethod
    def of(cls, *argv: str) -> Command:
        return cls(argv=tuple(argv))

    @classmethod
    def shell_line(cls, line: str) -> Command:
        return cls(line=line)

    @property
    def is_shell(self) -> bool:
        return self.line is not None

    @property
    def program(self) -> str:
        """The executable name (first word of a shell line)."""
        if self.line is not None:
            return self.line.split()[0]
        return self.argv[0]

    def __str__(self) -> str:
        return shellify(self)


@dataclass(frozen=True, slots=True)
class CommandOptions:
    """Per-invocation options.

    Attributes:
        capture_stderr_into_output: Append stderr chunks to ``output``
            (in arrival order) instead of keeping them separate.
        ignore_nonzero_exit: Report a non-zero exit as ``Succeeded``.
    """

    capture_stderr_into_output: bool = False
    ignore_nonzero_exit: bool = False


@dataclass(frozen=True, slots=True)
class Succeeded:
    """The process exited 0 (or non-zero with ``ignore_nonzero_exit``)."""


@dataclass(frozen=True, slots=True)
class Failed:
    """The process ran and exited with a non-zero code."""

    code: int


@dataclass(frozen=True, slots=True)
class TimedOut:
    """The process outlived its timeout and was killed."""

    timeout_ms: int


@dataclass(frozen=True, slots=True)
class LaunchFailed:
    """The process could not be started (missing executable, spawn error)."""

    reason: str


type ExitStatus = Succeeded | Failed | TimedOut | LaunchFailed


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Outcome of one ``run_command`` call.

    Attributes:
        command: The command that was run.
        output: Everything written to stdout (plus stderr when merged).
        stderr: Everything written to stderr; empty when merged.
        status: How the process ended.
    """

    command: Command
    output: str
    stderr: str
    status: ExitStatus

    @property
    def ok(self) -> bool:
        return isinstance(self.status, Succeeded)


def shellify(cmd: Command) -> str:
    """Render a command for humans. Never used for execution."""
    if cmd.line is not None:
        return cmd.line
    return shlex.join(cmd.argv)


def describe_failure(result: CommandResult, cwd: Path | None = None) -> str | None:
    """Build the error message for a failed result, None if it succeeded."""
    shown = shellify(result.command)
    match result.status:
        case Succeeded():
            return None
        case LaunchFailed(reason=reason):
            return f"Command could not be started: `{shown}` ({reason})"
        case TimedOut(timeout_ms=timeout_ms):
            return f"Command timed out after {timeout_ms / 1000:g}s: `{shown}`"
        case Failed(code=code):
            where = f" (in {str(cwd)!r})" if cwd is not None else ""
            lines = [f"Command error (exit code {code}): `{shown}`{where}"]
            if result.output.strip():
                lines.append(f"output: {tail(result.output)}")
            if result.stderr.strip():
                lines.append(f"stderr: {tail(result.stderr)}")
            return "\n".join(lines)


async def run_command(
    cmd: Command,
    input: str = "",
    options: CommandOptions = CommandOptions(),
    *,
    timeout_ms: int = DEFAULT_TIMEOUT_MS,
    cwd: Path | None = None,
    env: Mapping[str, str] | None = None,
) -> CommandResult:
    """Run ``cmd`` to completion or until ``timeout_ms`` elapses.

    Args:
        cmd: Command to launch.
        input: Text written to the child's stdin; empty means no input.
        options: Stream merging and exit-code handling.
        timeout_ms: Hard limit for the whole invocation.
        cwd: Working directory (inherits the current one if None).
        env: Full child environment (inherits the current one if None).

    Returns:
        A fully resolved CommandResult. Never raises for process failures;
        only cancellation of the awaiting task propagates.
    """
    stdin = asyncio.subprocess.PIPE if input else asyncio.subprocess.DEVNULL
    try:
        proc = await _spawn(cmd, stdin=stdin, cwd=cwd, env=env)
    except (OSError, ValueError) as e:
        logger.debug("launch failed: %s: %s", shellify(cmd), e)
        return CommandResult(command=cmd, output="", stderr="", status=LaunchFailed(str(e)))

    logger.debug("started pid %s: %s", proc.pid, shellify(cmd))

    output: list[str] = []
    errors = output if options.capture_stderr_into_output else []
    tasks: list[asyncio.Task[object]] = [
        asyncio.create_task(_collect(proc.stdout, output)),
        asyncio.create_task(_collect(proc.stderr, errors)),
        asyncio.create_task(proc.wait()),
    ]
    if input:
        tasks.append(asyncio.create_task(_feed(proc, input)))

    try:
        _, pending = await asyncio.wait(tasks, timeout=timeout_ms / 1000)
    except asyncio.CancelledError:
        logger.debug("cancelled, killing pid %s", proc.pid)
        await _terminate(proc, tasks)
        raise

    status: ExitStatus
    if pending:
        logger.debug("pid %s timed out after %d ms, killing", proc.pid, timeout_ms)
        await _terminate(proc, pending)
        status = TimedOut(timeout_ms)
    else:
        code = proc.returncode if proc.returncode is not None else 0
        logger.debug("pid %s exited with %d", proc.pid, code)
        if code != 0 and not options.ignore_nonzero_exit:
            status = Failed(code)
        else:
            status = Succeeded()

    return CommandResult(
        command=cmd,
        output="".join(output),
        stderr="" if options.capture_stderr_into_output else "".join(errors),
        status=status,
    )


async def _spawn(
    cmd: Command,
    *,
    stdin: int,
    cwd: Path | None,
    env: Mapping[str, str] | None,
) -> asyncio.subprocess.Process:
    kwargs: dict[str, object] = {
        "stdin": stdin,
        "stdout": asyncio.subprocess.PIPE,
        "stderr": asyncio.subprocess.PIPE,
        "cwd": str(cwd) if cwd is not None else None,
        "env": dict(env) if env is not None else None,
    }
    # Own process group, so a timeout can kill grandchildren holding the pipes.
    if sys.platform != "win32":
        kwargs["start_new_session"] = True

    if cmd.line is not None:
        return await asyncio.create_subprocess_shell(cmd.line, **kwargs)  # type: ignore[arg-type]
    return await asyncio.create_subprocess_exec(*cmd.argv, **kwargs)  # type: ignore[arg-type]


async def _collect(stream: asyncio.StreamReader | None, sink: list[str]) -> None:
    if stream is None:
        return
    decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
    while chunk := await stream.read(_CHUNK_SIZE):
        sink.append(decoder.decode(chunk))
    sink.append(decoder.decode(b"", final=True))


async def _feed(proc: asyncio.subprocess.Process, data: str) -> None:
    stdin = proc.stdin
    if stdin is None:
        return
    try:
        stdin.write(data.encode("utf-8"))
        await stdin.drain()
    except (BrokenPipeError, ConnectionResetError):
        logger.debug("pid %s exited before reading all of its input", proc.pid)
    finally:
        stdin.close()


def _kill(proc: asyncio.subprocess.Process) -> None:
    with suppress(ProcessLookupError):
        if sys.platform != "win32":
            os.killpg(proc.pid, signal.SIGKILL)
        else:
            proc.kill()


async def _terminate(
    proc: asyncio.subprocess.Process, pending: Iterable[asyncio.Task[object]]
) -> None:
    """Kill the child, then drain what its pipes still hold."""
    _kill(proc)
    waiting = [t for t in pending if not t.done()]
    waiting.append(asyncio.create_task(proc.wait()))
    _, stuck = await asyncio.wait(waiting, timeout=_KILL_GRACE_S)
    if stuck:
        logger.warning("pid %s: pipes still open %.0fs after kill", proc.pid, _KILL_GRACE_S)
    for task in stuck:
        task.cancel()
    await asyncio.gather(*stuck, return_exceptions=True)
