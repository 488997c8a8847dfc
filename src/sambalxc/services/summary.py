"""Operator-facing summary output for sambalxc."""

from typing import List

from rich.markup import escape

from sambalxc.models import ContainerHandle, ShareConfig


class SummaryService:
    """Prints the container description and the share summary block."""

    def __init__(self, console):
        self.console = console

    def access_path(self, handle: ContainerHandle, share: ShareConfig) -> str:
        ip = handle.ip or "<LXC_IP_ADDRESS>"
        return f"\\\\{ip}\\{share.name}"

    def build_lines(self, handle: ContainerHandle, share: ShareConfig, hostname: str) -> List[str]:
        lines = [
            f"[green]Container:[/green] CT {handle.ctid} ({escape(hostname or 'unknown')})",
            f"[yellow]IP Address:[/yellow] [cyan]{handle.ip or 'not detected'}[/cyan]",
            "",
            "[green]Samba Share Configuration:[/green]",
            f"[yellow]Samba Share Name:[/yellow] [cyan]{escape(share.name)}[/cyan]",
        ]

        access = f"[yellow]Access (example):[/yellow] [cyan]{escape(self.access_path(handle, share))}[/cyan]"
        if not handle.ip:
            access = f"{access} (IP address not detected by script)"
        lines.append(access)

        if share.is_bind_mounted:
            lines.append(
                "[yellow]Data Source:[/yellow] "
                f"[cyan]Bind-mounted from Proxmox host path '{escape(share.host_path)}'[/cyan]"
            )
            lines.append(f"[yellow]Mounted inside LXC at:[/yellow] [cyan]{escape(share.mount_path)}[/cyan]")
        else:
            lines.append(
                "[yellow]Data Source:[/yellow] "
                f"[cyan]Stored inside the LXC's disk at '{escape(share.mount_path)}'[/cyan]"
            )

        if share.guest_ok:
            lines.append("[green]Share is configured for GUEST access.[/green]")
        else:
            lines.append("[yellow]Share requires user authentication.[/yellow]")
            lines.append(
                f"[yellow]Create Samba users with 'pct exec {handle.ctid} -- smbpasswd -a "
                f"{escape('<username>')}' (username must exist in LXC).[/yellow]"
            )

        lines.append("[green]Remember to configure firewall rules if necessary.[/green]")
        return lines

    def print_summary(self, handle: ContainerHandle, share: ShareConfig, hostname: str):
        self.console.print("")
        for line in self.build_lines(handle, share, hostname):
            self.console.print(line)
        self.console.print("[bold green]Completed Successfully![/bold green]\n")
