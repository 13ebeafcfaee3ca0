"""Execution of external toolchain processes with a timeout and cancellation."""

from __future__ import annotations

import logging
import os
import signal
import subprocess
import threading
import time
from pathlib import Path
from typing import IO, List, Optional, Sequence, Union

from ..errors import BuildCancelled, ProcessFailed, ProcessTimeout, format_command

logger = logging.getLogger(__name__)

_READER_JOIN_TIMEOUT = 5.0


class CancelToken:
    """Cancellation flag shared between a build and the processes it runs.

    A token created with a parent is cancelled as soon as either itself or the parent is.
    """

    def __init__(self, parent: Optional["CancelToken"] = None) -> None:
        self._event = threading.Event()
        self._parent = parent

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        if self._event.is_set():
            return True
        return self._parent is not None and self._parent.cancelled


class ProcessRunner:
    """Runs commands as child processes without a shell.

    The combined stdout/stderr of the child is read on a background thread. It is forwarded
    line by line to the logger when streaming, and kept for the error message otherwise.
    """

    def __init__(
        self, log: Optional[logging.Logger] = None, poll_interval: float = 0.05
    ) -> None:
        self._log = log or logger
        self._poll_interval = poll_interval

    def run(
        self,
        working_dir: Union[str, Path],
        argv: Sequence[str],
        timeout: Optional[float],
        stream_output: bool = False,
        cancel_token: Optional[CancelToken] = None,
    ) -> None:
        """Run a command to completion.

        Parameters
        ----------
        working_dir : Union[str, Path]
            Working directory of the child.
        argv : Sequence[str]
            Executable and arguments, passed as a literal vector.
        timeout : Optional[float]
            Wall-clock limit in seconds. ``None`` waits forever, ``0`` expires immediately.
        stream_output : bool
            Forward the child's output to the log while it runs.
        cancel_token : CancelToken, optional
            Token that kills the child when cancelled.

        Raises
        ------
        ProcessTimeout
            If the child did not exit in time. It is killed before this is raised.
        BuildCancelled
            If the token was cancelled while the child was running. The child is killed.
        ProcessFailed
            If the child exited with a non-zero status or could not be started.
        """
        argv = [str(arg) for arg in argv]
        self._log.debug("Running in %s: %s", working_dir, format_command(argv))

        popen_kwargs = {}
        if os.name == "posix":
            # Own process group so compiler sub-processes are killed along with the driver
            popen_kwargs["start_new_session"] = True
        try:
            proc = subprocess.Popen(
                argv,
                cwd=str(working_dir),
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                encoding="utf-8",
                errors="replace",
                **popen_kwargs,
            )
        except OSError as e:
            raise ProcessFailed(argv, None, str(e)) from e

        lines: List[str] = []
        reader = threading.Thread(
            target=self._read_output, args=(proc.stdout, lines, stream_output), daemon=True
        )
        reader.start()

        try:
            self._wait(proc, argv, timeout, cancel_token, reader, lines)
        except BaseException:
            if proc.poll() is None:
                self._kill(proc)
            raise
        finally:
            reader.join(_READER_JOIN_TIMEOUT)
            if proc.stdout is not None:
                proc.stdout.close()

        if proc.returncode != 0:
            raise ProcessFailed(argv, proc.returncode, "".join(lines))

    def _wait(
        self,
        proc: subprocess.Popen,
        argv: List[str],
        timeout: Optional[float],
        cancel_token: Optional[CancelToken],
        reader: threading.Thread,
        lines: List[str],
    ) -> None:
        deadline = None if timeout is None else time.monotonic() + timeout
        while True:
            if cancel_token is not None and cancel_token.cancelled:
                self._kill(proc)
                raise BuildCancelled(argv)
            if deadline is not None and time.monotonic() >= deadline:
                self._kill(proc)
                reader.join(_READER_JOIN_TIMEOUT)
                raise ProcessTimeout(argv, timeout, "".join(lines))

            wait_time = self._poll_interval
            if deadline is not None:
                wait_time = max(0.0, min(wait_time, deadline - time.monotonic()))
            try:
                proc.wait(timeout=wait_time)
                return
            except subprocess.TimeoutExpired:
                continue

    def _kill(self, proc: subprocess.Popen) -> None:
        self._log.debug("Killing process %d", proc.pid)
        if os.name == "posix":
            try:
                os.killpg(proc.pid, signal.SIGKILL)
            except (ProcessLookupError, PermissionError):
                proc.kill()
        else:
            proc.kill()
        proc.wait()

    def _read_output(self, stream: IO[str], lines: List[str], forward: bool) -> None:
        for line in stream:
            lines.append(line)
            if forward:
                self._log.info(line.rstrip("\r\n"))


def run_process(
    working_dir: Union[str, Path],
    argv: Sequence[str],
    timeout: Optional[float],
    stream_output: bool = False,
    cancel_token: Optional[CancelToken] = None,
) -> None:
    """Run a command with a default :class:`ProcessRunner`. See :meth:`ProcessRunner.run`."""
    ProcessRunner().run(working_dir, argv, timeout, stream_output, cancel_token)
