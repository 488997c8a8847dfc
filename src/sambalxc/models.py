"""Shared domain models for sambalxc."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


@dataclass(frozen=True)
class ProvisioningRequest:
    """Container sizing and identity handed to the provisioner."""

    cpu: str
    ram: str
    disk: str
    os: str
    os_version: str
    unprivileged: bool
    tags: List[str] = field(default_factory=list)
    hostname: str = "samba"
    storage: str = "local-lvm"
    template_storage: str = "local"
    bridge: str = "vmbr0"


@dataclass(frozen=True)
class ContainerHandle:
    """Identity and address of a provisioned container."""

    ctid: str
    ip: Optional[str] = None


@dataclass(frozen=True)
class ExecResult:
    success: bool
    stdout: str = ""
    stderr: str = ""
    returncode: int = 0


@dataclass
class ShareConfig:
    """Share settings.

    `host_path` is the only field that changes after resolution: it is
    cleared by `fall_back_to_internal` when the host storage cannot be
    attached, and never restored within the same run.
    """

    name: str
    mount_path: str
    host_path: Optional[str] = None
    guest_ok: bool = True
    writable: bool = True
    macos_compat: bool = False

    @property
    def read_only(self) -> bool:
        return not self.writable

    @property
    def is_bind_mounted(self) -> bool:
        return bool(self.host_path)

    def fall_back_to_internal(self):
        self.host_path = None


class StorageMode(Enum):
    INTERNAL = "internal"
    ATTACHED = "attached"


@dataclass
class InstallerSettings:
    """Fully resolved inputs for a single run."""

    request: ProvisioningRequest
    share: ShareConfig
    dry_run: bool = False
