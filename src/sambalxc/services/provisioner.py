"""Proxmox container provisioning through the `pct`/`pveam` tools."""

import re
import time
from typing import Callable, List, Optional

from rich.markup import escape

from sambalxc.constants import BIND_MOUNT_KEY
from sambalxc.errors import InstallerError
from sambalxc.errors_catalog import actionable_error
from sambalxc.models import ContainerHandle, ProvisioningRequest

_IPV4_PATTERN = re.compile(r"inet (\d{1,3}(?:\.\d{1,3}){3})/")


class PctProvisioner:
    """Creates, starts and stops LXC containers on the local Proxmox host."""

    def __init__(self, logger, console, run_cmd: Callable):
        self.logger = logger
        self.console = console
        self.run_cmd = run_cmd

    def create_container(self, request: ProvisioningRequest) -> ContainerHandle:
        template = self.resolve_template(request)
        ctid = self.next_ctid()

        self.console.print(f"[blue]Creating LXC container {escape(ctid)} from {escape(template)}...[/blue]")
        self.logger.info("Creating container %s (%s)", ctid, template)
        try:
            self.run_cmd(self.build_create_command(ctid, template, request), capture_output=True)
        except InstallerError as exc:
            raise InstallerError(
                f"{actionable_error('container_create_failed', ctid=ctid, storage=request.storage)}\n{exc}"
            ) from exc
        self.console.print(f"[green]LXC container {escape(ctid)} created.[/green]")

        handle = ContainerHandle(ctid=ctid)
        self.start(handle)
        return ContainerHandle(ctid=ctid, ip=self.wait_for_ip(handle))

    def build_create_command(self, ctid: str, template: str, request: ProvisioningRequest) -> List[str]:
        cmd = [
            "pct",
            "create",
            ctid,
            template,
            "--hostname",
            request.hostname,
            "--cores",
            request.cpu,
            "--memory",
            request.ram,
            "--rootfs",
            f"{request.storage}:{request.disk}",
            "--net0",
            f"name=eth0,bridge={request.bridge},ip=dhcp",
            "--unprivileged",
            "1" if request.unprivileged else "0",
            "--features",
            "nesting=1",
            "--onboot",
            "1",
        ]
        if request.tags:
            cmd += ["--tags", ";".join(request.tags)]
        return cmd

    def next_ctid(self) -> str:
        result = self.run_cmd(["pvesh", "get", "/cluster/nextid"], capture_output=True)
        return result.stdout.strip()

    def resolve_template(self, request: ProvisioningRequest) -> str:
        # "alpine-3.19-" so that version 3.1 never matches a 3.19 template
        prefix = f"{request.os}-{request.os_version}-"

        local = self.run_cmd(["pveam", "list", request.template_storage], capture_output=True)
        cached = sorted(
            volid
            for volid in (line.split()[0] for line in local.stdout.splitlines() if line.strip())
            if volid.partition("vztmpl/")[2].startswith(prefix)
        )
        if cached:
            self.logger.debug("Using cached template %s", cached[-1])
            return cached[-1]

        self.console.print(f"[blue]Downloading {escape(prefix.rstrip('-'))} template...[/blue]")
        self.run_cmd(["pveam", "update"], capture_output=True)
        available = self.run_cmd(["pveam", "available", "--section", "system"], capture_output=True)
        candidates = sorted(
            parts[1]
            for parts in (line.split() for line in available.stdout.splitlines())
            if len(parts) >= 2 and parts[1].startswith(prefix)
        )
        if not candidates:
            raise InstallerError(
                actionable_error("template_not_found", os=request.os, version=request.os_version)
            )

        name = candidates[-1]
        self.run_cmd(["pveam", "download", request.template_storage, name], capture_output=True)
        return f"{request.template_storage}:vztmpl/{name}"

    def wait_for_ip(self, handle: ContainerHandle, max_retries: int = 20) -> Optional[str]:
        cmd = ["pct", "exec", handle.ctid, "--", "ip", "-4", "-o", "addr", "show", "dev", "eth0"]
        for _ in range(max_retries):
            result = self.run_cmd(cmd, check=False, capture_output=True)
            match = _IPV4_PATTERN.search(result.stdout or "")
            if result.returncode == 0 and match:
                return match.group(1)
            time.sleep(1)

        self.logger.warning("No IPv4 address detected for CT %s", handle.ctid)
        return None

    def start(self, handle: ContainerHandle):
        try:
            self.run_cmd(["pct", "start", handle.ctid], capture_output=True)
        except InstallerError as exc:
            raise InstallerError(
                f"{actionable_error('container_start_failed', ctid=handle.ctid)}\n{exc}"
            ) from exc

    def stop(self, handle: ContainerHandle):
        self.run_cmd(["pct", "stop", handle.ctid], capture_output=True)

    def attach_bind_mount(self, handle: ContainerHandle, host_path: str, mount_path: str) -> bool:
        result = self.run_cmd(
            ["pct", "set", handle.ctid, f"-{BIND_MOUNT_KEY}", f"{host_path},mp={mount_path}"],
            check=False,
            capture_output=True,
        )
        return result.returncode == 0
