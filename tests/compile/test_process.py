import logging
import sys
import threading
import time
from pathlib import Path

import pytest

from native_launchers.compile import CancelToken, ProcessRunner, run_process
from native_launchers.errors import BuildCancelled, ProcessFailed, ProcessTimeout

pytestmark = pytest.mark.posix_only


def test_run_success(tmp_path: Path):
    run_process(tmp_path, ["sh", "-c", "echo ok > marker"], timeout=10)
    assert (tmp_path / "marker").read_text().strip() == "ok"


def test_run_failure_keeps_output(tmp_path: Path):
    with pytest.raises(ProcessFailed) as excinfo:
        run_process(tmp_path, ["sh", "-c", "echo broken >&2; exit 3"], timeout=10)

    error = excinfo.value
    assert error.exit_code == 3
    assert "broken" in error.output
    assert "broken" in str(error)
    assert "command: sh -c" in str(error)


def test_run_missing_executable(tmp_path: Path):
    with pytest.raises(ProcessFailed) as excinfo:
        run_process(tmp_path, [str(tmp_path / "no-such-compiler")], timeout=10)
    assert excinfo.value.exit_code is None


def test_run_zero_timeout_expires_immediately(tmp_path: Path):
    with pytest.raises(ProcessTimeout) as excinfo:
        run_process(tmp_path, ["sh", "-c", "sleep 5; touch marker"], timeout=0)

    assert excinfo.value.timeout == 0
    assert "timed out" in str(excinfo.value)
    time.sleep(0.2)
    assert not (tmp_path / "marker").exists()


def test_run_kills_process_on_timeout(tmp_path: Path):
    start = time.monotonic()
    with pytest.raises(ProcessTimeout):
        run_process(tmp_path, ["sh", "-c", "sleep 30"], timeout=0.3)
    assert time.monotonic() - start < 10


def test_run_kills_child_processes_on_timeout(tmp_path: Path):
    script = "(sleep 1; touch marker) & wait"
    with pytest.raises(ProcessTimeout):
        run_process(tmp_path, ["sh", "-c", script], timeout=0.2)
    time.sleep(1.5)
    assert not (tmp_path / "marker").exists()


def test_run_already_cancelled(tmp_path: Path):
    token = CancelToken()
    token.cancel()
    with pytest.raises(BuildCancelled):
        run_process(tmp_path, ["sh", "-c", "sleep 30"], timeout=None, cancel_token=token)


def test_run_cancelled_while_running(tmp_path: Path):
    token = CancelToken()
    timer = threading.Timer(0.2, token.cancel)
    timer.start()
    start = time.monotonic()
    try:
        with pytest.raises(BuildCancelled):
            run_process(tmp_path, ["sh", "-c", "sleep 30"], timeout=60, cancel_token=token)
    finally:
        timer.cancel()
    assert time.monotonic() - start < 10


def test_cancel_token_follows_parent():
    parent = CancelToken()
    child = CancelToken(parent=parent)
    assert not child.cancelled

    parent.cancel()
    assert child.cancelled

    sibling = CancelToken(parent=CancelToken())
    sibling.cancel()
    assert sibling.cancelled


def test_run_streams_output(tmp_path: Path, caplog: pytest.LogCaptureFixture):
    log = logging.getLogger("native_launchers.tests.process")
    runner = ProcessRunner(log=log)
    with caplog.at_level(logging.INFO, logger=log.name):
        runner.run(tmp_path, ["sh", "-c", "echo first; echo second >&2"], 10, stream_output=True)

    messages = [record.getMessage() for record in caplog.records if record.name == log.name]
    assert "first" in messages
    assert "second" in messages


def test_run_quiet_by_default(tmp_path: Path, caplog: pytest.LogCaptureFixture):
    log = logging.getLogger("native_launchers.tests.quiet")
    with caplog.at_level(logging.INFO, logger=log.name):
        ProcessRunner(log=log).run(tmp_path, ["sh", "-c", "echo hidden"], 10)
    assert not [record for record in caplog.records if record.name == log.name]


if __name__ == "__main__":
    pytest.main(sys.argv)
