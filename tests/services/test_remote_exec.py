import subprocess

import pytest

from sambalxc.errors import InstallerError
from sambalxc.models import ContainerHandle
from sambalxc.services.remote_exec import PctExecutor


class DummyLogger:
    def debug(self, *_args, **_kwargs):
        return None


HANDLE = ContainerHandle(ctid="105")


def test_exec_wraps_command_in_pct_shell():
    calls = []

    def fake_run_cmd(cmd, check=True, capture_output=False):
        calls.append((cmd, check, capture_output))
        return subprocess.CompletedProcess(cmd, 0, stdout="samba\n", stderr="")

    result = PctExecutor(logger=DummyLogger(), run_cmd=fake_run_cmd).exec(HANDLE, "hostname")

    assert result.success is True
    assert result.stdout == "samba\n"
    assert calls == [(["pct", "exec", "105", "--", "sh", "-c", "hostname"], False, True)]


def test_exec_reports_failure_without_raising():
    def fake_run_cmd(cmd, check=True, capture_output=False):
        return subprocess.CompletedProcess(cmd, 3, stdout="", stderr="stopped")

    result = PctExecutor(logger=DummyLogger(), run_cmd=fake_run_cmd).exec(HANDLE, "rc-service samba status")

    assert result.success is False
    assert result.returncode == 3


def test_run_raises_with_command_output():
    def fake_run_cmd(cmd, check=True, capture_output=False):
        return subprocess.CompletedProcess(cmd, 1, stdout="", stderr="apk: not found")

    executor = PctExecutor(logger=DummyLogger(), run_cmd=fake_run_cmd)

    with pytest.raises(InstallerError, match="apk: not found"):
        executor.run(HANDLE, "apk update")
