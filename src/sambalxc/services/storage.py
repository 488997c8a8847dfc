"""Share storage attachment for sambalxc."""

import shlex
import time

from rich.markup import escape

from sambalxc.constants import SETTLE_DELAY_SECONDS
from sambalxc.errors import InstallerError
from sambalxc.errors_catalog import actionable_error
from sambalxc.models import ContainerHandle, ShareConfig, StorageMode


class StorageAttachmentService:
    """Decides where share data lives and attaches host storage when requested.

    A configured host path is bind-mounted into the container. When the host
    directory cannot be created or the bind mount cannot be configured, the
    share degrades to internal storage via `ShareConfig.fall_back_to_internal`.
    Either way the mount path is created inside the container afterwards.
    """

    def __init__(self, logger, console, provisioner, executor, filesystem_service, settle_delay=SETTLE_DELAY_SECONDS):
        self.logger = logger
        self.console = console
        self.provisioner = provisioner
        self.executor = executor
        self.filesystem_service = filesystem_service
        self.settle_delay = settle_delay

    def attach(self, share: ShareConfig, handle: ContainerHandle) -> StorageMode:
        mode = StorageMode.INTERNAL

        if share.is_bind_mounted:
            if self._ensure_host_dir(share):
                mode = self._bind_mount(share, handle)
        else:
            self._info(
                "No host_share_path defined. Share data will be stored inside the LXC at "
                f"'{share.mount_path}'."
            )

        self._info(f"Ensuring LXC share path exists: {share.mount_path}")
        self.executor.run(handle, f"mkdir -p {shlex.quote(share.mount_path)}")
        return mode

    def _ensure_host_dir(self, share: ShareConfig) -> bool:
        if self.filesystem_service.dir_exists(share.host_path):
            return True

        self._warn(f"Host share path '{share.host_path}' does not exist. Attempting to create.")
        if self.filesystem_service.make_dirs(share.host_path):
            self._ok(f"Host path '{share.host_path}' created. YOU MUST SET PERMISSIONS ON IT MANUALLY.")
            return True

        self._error(actionable_error("host_dir_create_failed", path=share.host_path))
        share.fall_back_to_internal()
        self._warn(f"Proceeding with internal LXC storage for the share at '{share.mount_path}'.")
        return False

    def _bind_mount(self, share: ShareConfig, handle: ContainerHandle) -> StorageMode:
        self._info(f"Configuring bind mount: Host '{share.host_path}' to LXC '{share.mount_path}'")

        if not self.provisioner.attach_bind_mount(handle, share.host_path, share.mount_path):
            self._error(actionable_error("bind_mount_failed", path=share.host_path))
            share.fall_back_to_internal()
            self._warn(
                f"Proceeding with internal LXC storage for the share at '{share.mount_path}' "
                "due to bind mount failure."
            )
            return StorageMode.INTERNAL

        self._ok("Bind mount configured successfully.")
        self._info(f"Restarting CT {handle.ctid} to activate bind mount...")
        try:
            self.provisioner.stop(handle)
        except InstallerError as exc:
            # The container may already be stopped.
            self.logger.debug("Ignoring stop failure for CT %s: %s", handle.ctid, exc)
        self.provisioner.start(handle)
        time.sleep(self.settle_delay)
        return StorageMode.ATTACHED

    def _info(self, message: str):
        self.console.print(f"[blue]{escape(message)}[/blue]")
        self.logger.info(message)

    def _ok(self, message: str):
        self.console.print(f"[green]{escape(message)}[/green]")
        self.logger.info(message)

    def _warn(self, message: str):
        self.console.print(f"[yellow]{escape(message)}[/yellow]")
        self.logger.warning(message)

    def _error(self, message: str):
        self.console.print(f"[bold red]Error:[/bold red] {escape(message)}")
        self.logger.error(message)
