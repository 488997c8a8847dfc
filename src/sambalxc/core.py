import logging
import subprocess
from typing import List, Optional

from rich.console import Console
from rich.markup import escape
from rich.syntax import Syntax

from .errors import InstallerError
from .models import ContainerHandle, InstallerSettings, StorageMode
from .services.command_runner import CommandRunner
from .services.filesystem import FileSystemService
from .services.provisioner import PctProvisioner
from .services.remote_exec import PctExecutor, RemoteExecutor
from .services.samba import SambaService, build_smb_conf
from .services.storage import StorageAttachmentService
from .services.summary import SummaryService

console = Console()
logger = logging.getLogger("sambalxc")


class SambaLxcInstaller:
    APP = "Samba File Server"

    def __init__(
        self,
        settings: InstallerSettings,
        provisioner=None,
        executor: Optional[RemoteExecutor] = None,
        filesystem_service: Optional[FileSystemService] = None,
    ):
        self.settings = settings
        self.request = settings.request
        self.share = settings.share
        self.handle: Optional[ContainerHandle] = None
        self.hostname = ""
        self.storage_mode = StorageMode.INTERNAL
        self.samba_healthy: Optional[bool] = None

        self.command_runner = CommandRunner(logger=logger)
        self.provisioner = provisioner or PctProvisioner(
            logger=logger,
            console=console,
            run_cmd=self._run_cmd,
        )
        self.executor = executor or PctExecutor(logger=logger, run_cmd=self._run_cmd)
        self.filesystem_service = filesystem_service or FileSystemService(logger=logger)
        self.storage_service = StorageAttachmentService(
            logger=logger,
            console=console,
            provisioner=self.provisioner,
            executor=self.executor,
            filesystem_service=self.filesystem_service,
        )
        self.samba_service = SambaService(logger=logger, console=console, executor=self.executor)
        self.summary_service = SummaryService(console=console)

    def _run_cmd(
        self,
        cmd: List[str],
        check: bool = True,
        capture_output: bool = False,
    ) -> subprocess.CompletedProcess:
        return self.command_runner.run(cmd, check=check, capture_output=capture_output)

    def acquire_container(self) -> ContainerHandle:
        logger.info("Provisioning %s container (%s %s)", self.APP, self.request.os, self.request.os_version)
        self.handle = self.provisioner.create_container(self.request)
        logger.info("Container %s ready at %s", self.handle.ctid, self.handle.ip or "<unknown IP>")
        return self.handle

    def attach_storage(self) -> StorageMode:
        self.storage_mode = self.storage_service.attach(self.share, self.handle)
        return self.storage_mode

    def configure_samba(self) -> bool:
        """Installs and configures Samba; returns whether the service reports healthy."""
        console.print(f"[blue]Starting Samba Configuration for CT {self.handle.ctid}...[/blue]")
        self.samba_service.install_packages(self.handle)
        self.hostname = self.samba_service.get_hostname(self.handle)
        self.samba_service.write_config(self.handle, self.share, self.hostname)
        self.samba_service.apply_permissions(self.handle, self.share, self.request.unprivileged)
        self.samba_service.enable_and_restart(self.handle)
        self.samba_healthy = self.samba_service.check_health(self.handle)
        return self.samba_healthy

    def print_plan(self):
        request = self.request
        console.print(f"[bold blue]{self.APP} (dry run)[/bold blue]")
        console.print(
            f"Container: {escape(request.os)} {escape(request.os_version)}, {request.cpu} CPU, {request.ram} MB RAM, "
            f"{request.disk} GB disk on '{escape(request.storage)}', "
            f"{'unprivileged' if request.unprivileged else 'privileged'}"
        )
        console.print(f"Tags: {escape(';'.join(request.tags)) or '<none>'}")
        if self.share.is_bind_mounted:
            console.print(
                f"Storage: bind mount '{escape(self.share.host_path)}' -> '{escape(self.share.mount_path)}'"
            )
        else:
            console.print(f"Storage: internal at '{escape(self.share.mount_path)}'")
        console.print(Syntax(build_smb_conf(self.share, request.hostname), "ini"))

    def run(self) -> int:
        try:
            logger.info("Starting %s setup...", self.APP)

            if self.settings.dry_run:
                self.print_plan()
                return 0

            self.acquire_container()
            self.attach_storage()
            healthy = self.configure_samba()
            if not healthy:
                logger.warning("Continuing although the Samba service is not running.")

            self.summary_service.print_summary(self.handle, self.share, self.hostname)
            return 0

        except KeyboardInterrupt:
            console.print("[bold red]Operation cancelled by user.[/bold red]")
            logger.info("Operation cancelled by user")
            return 1
        except InstallerError as exc:
            console.print(f"[bold red]Error:[/bold red] {escape(str(exc))}")
            logger.error(str(exc))
            return 1
        except Exception as exc:
            console.print(f"[bold red]Unexpected error:[/bold red] {escape(str(exc))}")
            logger.exception("Unexpected error")
            return 1
