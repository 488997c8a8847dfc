"""Samba installation and configuration inside the container."""

import shlex

from rich.markup import escape

from sambalxc.constants import (
    FORCE_CREATE_MODE,
    FORCE_DIRECTORY_MODE,
    GUEST_ACCOUNT,
    SAMBA_LOG_DIR,
    SAMBA_PACKAGES,
    SAMBA_SERVICE,
    SHARE_DIR_MODE,
    SMB_CONF_PATH,
    UNPRIVILEGED_NOBODY_HOST_UID,
    WORKGROUP,
)
from sambalxc.errors_catalog import actionable_error
from sambalxc.models import ContainerHandle, ShareConfig


def yes_no(value: bool) -> str:
    return "yes" if value else "no"


def build_smb_conf(share: ShareConfig, hostname: str) -> str:
    """Render smb.conf with one global section and one share section."""
    macos_section = ""
    if share.macos_compat:
        macos_section = """
    vfs objects = fruit streams_xattr
    fruit:metadata = stream
    fruit:model = MacSamba"""

    return f"""[global]
    workgroup = {WORKGROUP}
    server string = Samba Server on {hostname}
    netbios name = {hostname}
    security = user
    map to guest = bad user
    dns proxy = no
    log file = /var/log/samba/log.%m
    max log size = 50
    guest account = {GUEST_ACCOUNT}

[{share.name}]
    comment = Shared Folder
    path = {share.mount_path}
    browsable = yes
    writable = {yes_no(share.writable)}
    guest ok = {yes_no(share.guest_ok)}
    read only = {yes_no(share.read_only)}
    force create mode = {FORCE_CREATE_MODE}
    force directory mode = {FORCE_DIRECTORY_MODE}{macos_section}
"""


class SambaService:
    """Installs, configures and starts Samba through a remote executor."""

    def __init__(self, logger, console, executor):
        self.logger = logger
        self.console = console
        self.executor = executor

    def install_packages(self, handle: ContainerHandle):
        self.console.print(f"[blue]Installing Samba packages in CT {handle.ctid}...[/blue]")
        self.executor.run(handle, f"apk update && apk add {' '.join(SAMBA_PACKAGES)}")
        self.console.print("[green]Samba packages installed.[/green]")

    def get_hostname(self, handle: ContainerHandle) -> str:
        return self.executor.run(handle, "hostname").stdout.strip()

    def write_config(self, handle: ContainerHandle, share: ShareConfig, hostname: str) -> str:
        self.console.print(f"[blue]Creating Samba configuration ({SMB_CONF_PATH})...[/blue]")
        content = build_smb_conf(share, hostname)
        self.executor.run(handle, f"cat <<'EOF' > {SMB_CONF_PATH}\n{content}EOF")
        self.console.print("[green]Samba configuration file created.[/green]")
        return content

    def apply_permissions(self, handle: ContainerHandle, share: ShareConfig, unprivileged: bool):
        if not share.is_bind_mounted:
            self.console.print(
                f"[blue]Setting permissions for internal LXC share path: {escape(share.mount_path)}[/blue]"
            )
            path = shlex.quote(share.mount_path)
            self.executor.run(handle, f"chown -R {GUEST_ACCOUNT}:{GUEST_ACCOUNT} {path}")
            self.executor.run(handle, f"chmod -R {SHARE_DIR_MODE} {path}")
            self.console.print("[green]Permissions set on internal share path.[/green]")
            return

        for message in self.bind_mount_guidance(share.host_path, unprivileged):
            self.console.print(f"[yellow]{escape(message)}[/yellow]")
            self.logger.warning(message)

    @staticmethod
    def bind_mount_guidance(host_path: str, unprivileged: bool):
        if unprivileged:
            return [
                f"UNPRIVILEGED CONTAINER: Host path '{host_path}' is bind-mounted.",
                "YOU MUST ensure correct UID/GID mapping and permissions on the HOST for user "
                "'nobody' (typically UID/GID 65534 within LXC) or other intended Samba users.",
                f"Example host command for 'nobody' if mapped UID is {UNPRIVILEGED_NOBODY_HOST_UID}: "
                f"'sudo chown -R {UNPRIVILEGED_NOBODY_HOST_UID}:{UNPRIVILEGED_NOBODY_HOST_UID} {host_path} "
                f"&& sudo chmod -R u+rwX,g+rX,o+rX {host_path}'",
            ]
        return [
            f"PRIVILEGED CONTAINER: Host path '{host_path}' is bind-mounted.",
            "Ensure this path on the HOST is accessible (e.g., readable/writable) by the 'nobody' "
            "user (UID 65534) or other intended Samba users.",
            f"Example host command: 'sudo chown -R nobody:nogroup {host_path} && sudo chmod -R "
            f"{SHARE_DIR_MODE} {host_path}' (if host 'nobody' UID is 65534)",
        ]

    def enable_and_restart(self, handle: ContainerHandle):
        self.console.print("[blue]Enabling and starting Samba service...[/blue]")
        self.executor.run(handle, f"rc-update add {SAMBA_SERVICE} default")
        # restart, not start, so the freshly written config is loaded
        self.executor.run(handle, f"rc-service {SAMBA_SERVICE} restart")

    def check_health(self, handle: ContainerHandle) -> bool:
        result = self.executor.exec(handle, f"rc-service {SAMBA_SERVICE} status --quiet")
        if result.success:
            self.console.print("[green]Samba service is running.[/green]")
            return True

        message = actionable_error("samba_not_running", ctid=handle.ctid, log_dir=SAMBA_LOG_DIR)
        self.console.print(f"[bold red]Error:[/bold red] {escape(message)}")
        self.logger.error(message)
        return False
