"""Input resolution for sambalxc."""

import os
from typing import Any, Dict, List, Mapping, Optional

from sambalxc.models import InstallerSettings, ProvisioningRequest, ShareConfig


class InputResolver:
    """Resolves each input from CLI overrides, environment, config file and defaults.

    The first source holding a non-empty value wins. String flags are parsed
    here, once, using plain string equality.
    """

    DEFAULTS: Dict[str, str] = {
        "tags": "alpine;smb;samba;fileserver",
        "cpu": "1",
        "ram": "512",
        "disk": "4",
        "os": "alpine",
        "version": "3.19",
        "unprivileged": "1",
        "hostname": "samba",
        "storage": "local-lvm",
        "template_storage": "local",
        "bridge": "vmbr0",
        "share_name": "Samba",
        "host_share_path": "",
        "lxc_share_path": "/shared_data/samba_share",
        "guest_ok": "yes",
        "writable": "yes",
        "macos_compat": "no",
    }

    ENV_VARS: Dict[str, str] = {
        "share_name": "var_samba_share_name",
        "guest_ok": "var_samba_guest_ok",
        "writable": "var_samba_writable",
        "macos_compat": "var_samba_macos_compat",
    }

    def __init__(self, environ: Optional[Mapping[str, str]] = None):
        self.environ = os.environ if environ is None else environ

    @classmethod
    def env_var(cls, key: str) -> str:
        return cls.ENV_VARS.get(key, f"var_{key}")

    def resolve_value(self, key: str, overrides: Mapping[str, Any], config: Mapping[str, Any]) -> Any:
        for candidate in (
            overrides.get(key),
            self.environ.get(self.env_var(key)),
            config.get(key),
        ):
            if candidate is not None and candidate != "":
                return candidate
        return self.DEFAULTS[key]

    def resolve(
        self,
        overrides: Optional[Mapping[str, Any]] = None,
        config: Optional[Mapping[str, Any]] = None,
        dry_run: bool = False,
    ) -> InstallerSettings:
        overrides = overrides or {}
        config = config or {}
        values = {key: self.resolve_value(key, overrides, config) for key in self.DEFAULTS}

        request = ProvisioningRequest(
            cpu=str(values["cpu"]),
            ram=str(values["ram"]),
            disk=str(values["disk"]),
            os=str(values["os"]),
            os_version=str(values["version"]),
            unprivileged=parse_flag(values["unprivileged"], true_literal="1"),
            tags=parse_tags(values["tags"]),
            hostname=str(values["hostname"]),
            storage=str(values["storage"]),
            template_storage=str(values["template_storage"]),
            bridge=str(values["bridge"]),
        )
        share = ShareConfig(
            name=str(values["share_name"]),
            mount_path=str(values["lxc_share_path"]),
            host_path=str(values["host_share_path"]) or None,
            guest_ok=parse_flag(values["guest_ok"], true_literal="yes"),
            writable=parse_flag(values["writable"], false_literal="no"),
            macos_compat=parse_flag(values["macos_compat"], true_literal="yes"),
        )
        return InstallerSettings(request=request, share=share, dry_run=dry_run)


def parse_flag(value: Any, true_literal: Optional[str] = None, false_literal: Optional[str] = None) -> bool:
    """Parse a "yes"/"no" or "1"/"0" style flag.

    With `true_literal` only that exact string is true; with `false_literal`
    everything but that exact string is true. YAML booleans pass through.
    """
    if isinstance(value, bool):
        return value
    text = str(value)
    if true_literal is not None:
        return text == true_literal
    return text != false_literal


def parse_tags(value: Any) -> List[str]:
    if isinstance(value, (list, tuple)):
        return [str(tag) for tag in value if str(tag)]
    return [tag for tag in str(value).split(";") if tag]
