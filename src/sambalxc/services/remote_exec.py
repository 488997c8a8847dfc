"""Command execution inside a provisioned container."""

from typing import Callable, List

from sambalxc.errors import InstallerError
from sambalxc.models import ContainerHandle, ExecResult


class RemoteExecutor:
    """Runs shell command strings inside a container.

    Implementations return an `ExecResult` and never raise for a non-zero
    exit status; the caller decides what a failure means.
    """

    def exec(self, handle: ContainerHandle, command: str) -> ExecResult:
        raise NotImplementedError

    def run(self, handle: ContainerHandle, command: str) -> ExecResult:
        """Execute and raise `InstallerError` when the command fails."""
        result = self.exec(handle, command)
        if not result.success:
            message = f"Command failed in CT {handle.ctid} ({result.returncode}): {command}"
            detail = (result.stderr or result.stdout).strip()
            if detail:
                message = f"{message}\n{detail}"
            raise InstallerError(message)
        return result


class PctExecutor(RemoteExecutor):
    """Executes through `pct exec <ctid> -- sh -c <command>` on the Proxmox host."""

    SHELL = "sh"

    def __init__(self, logger, run_cmd: Callable):
        self.logger = logger
        self.run_cmd = run_cmd

    def build_command(self, handle: ContainerHandle, command: str) -> List[str]:
        return ["pct", "exec", handle.ctid, "--", self.SHELL, "-c", command]

    def exec(self, handle: ContainerHandle, command: str) -> ExecResult:
        self.logger.debug("CT %s: %s", handle.ctid, command)
        result = self.run_cmd(self.build_command(handle, command), check=False, capture_output=True)
        return ExecResult(
            success=result.returncode == 0,
            stdout=result.stdout or "",
            stderr=result.stderr or "",
            returncode=result.returncode,
        )
