import logging
import os

import click
from rich.logging import RichHandler

from .core import InstallerError, SambaLxcInstaller
from .services.config_loader import ConfigLoader
from .services.inputs import InputResolver

DEFAULT_CONFIG_FILE = ".sambalxc.yml"


def _resolve_option(cli_value, config, key, default=None):
    if cli_value is not None:
        return cli_value
    if key in config:
        return config[key]
    return default


logging.basicConfig(
    level="INFO",
    format="%(message)s",
    datefmt="[%X]",
    handlers=[RichHandler(rich_tracebacks=True, show_level=False, show_path=False)],
)

YES_NO = click.Choice(["yes", "no"])


@click.command()
@click.option(
    "--config",
    required=False,
    type=click.Path(),
    help=f"Path to a YAML configuration file. Defaults to {DEFAULT_CONFIG_FILE} if present.",
)
@click.option("--share-name", required=False, help="Name of the Samba share (default: Samba).")
@click.option(
    "--host-share-path",
    required=False,
    help="Absolute path on the Proxmox host to bind-mount. Leave empty to store data inside the LXC.",
)
@click.option(
    "--lxc-share-path",
    required=False,
    help="Absolute path inside the LXC for the share (default: /shared_data/samba_share).",
)
@click.option("--guest-ok", type=YES_NO, default=None, help="Allow guest access (default: yes).")
@click.option("--writable", type=YES_NO, default=None, help="Make the share writable (default: yes).")
@click.option(
    "--macos-compat",
    type=YES_NO,
    default=None,
    help="Enable the fruit VFS module for macOS clients (default: no).",
)
@click.option("--cpu", required=False, help="CPU cores for the container (default: 1).")
@click.option("--ram", required=False, help="Memory in MB (default: 512).")
@click.option("--disk", required=False, help="Root disk size in GB (default: 4).")
@click.option("--os", "os_name", required=False, help="Template distribution (default: alpine).")
@click.option("--os-version", required=False, help="Template version (default: 3.19).")
@click.option(
    "--unprivileged",
    type=click.Choice(["1", "0"]),
    default=None,
    help="1 for an unprivileged container, 0 for privileged (default: 1).",
)
@click.option("--tags", required=False, help="Semicolon separated container tags.")
@click.option("--hostname", required=False, help="Container hostname (default: samba).")
@click.option("--storage", required=False, help="Storage for the root filesystem (default: local-lvm).")
@click.option("--template-storage", required=False, help="Storage holding LXC templates (default: local).")
@click.option("--bridge", required=False, help="Network bridge (default: vmbr0).")
@click.option("--verbose", is_flag=True, default=None, help="Enable verbose logging")
@click.option("--log-file", type=click.Path(), help="Path to log file")
@click.option(
    "--dry-run",
    is_flag=True,
    default=None,
    help="Print the resolved plan and smb.conf without touching the host.",
)
def main(
    config,
    share_name,
    host_share_path,
    lxc_share_path,
    guest_ok,
    writable,
    macos_compat,
    cpu,
    ram,
    disk,
    os_name,
    os_version,
    unprivileged,
    tags,
    hostname,
    storage,
    template_storage,
    bridge,
    verbose,
    log_file,
    dry_run,
):
    """Provision an Alpine LXC container on Proxmox VE running a Samba share."""
    logger = logging.getLogger("sambalxc")

    try:
        config_loader = ConfigLoader()
        resolved_config = config
        if resolved_config is None:
            default_config_path = os.path.join(os.getcwd(), DEFAULT_CONFIG_FILE)
            if os.path.exists(default_config_path):
                resolved_config = default_config_path

        config_values = config_loader.load(resolved_config)
    except InstallerError as exc:
        raise click.ClickException(str(exc)) from exc

    verbose = bool(_resolve_option(verbose, config_values, "verbose", default=False))
    log_file = _resolve_option(log_file, config_values, "log_file")
    dry_run = bool(_resolve_option(dry_run, config_values, "dry_run", default=False))

    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
        logger.setLevel(logging.DEBUG)
    else:
        logger.setLevel(logging.INFO)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
        file_handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(message)s"))
        logger.addHandler(file_handler)

    overrides = {
        "share_name": share_name,
        "host_share_path": host_share_path,
        "lxc_share_path": lxc_share_path,
        "guest_ok": guest_ok,
        "writable": writable,
        "macos_compat": macos_compat,
        "cpu": cpu,
        "ram": ram,
        "disk": disk,
        "os": os_name,
        "version": os_version,
        "unprivileged": unprivileged,
        "tags": tags,
        "hostname": hostname,
        "storage": storage,
        "template_storage": template_storage,
        "bridge": bridge,
    }
    settings = InputResolver().resolve(
        overrides=overrides,
        config=config_values,
        dry_run=dry_run,
    )

    installer = SambaLxcInstaller(settings=settings)
    raise SystemExit(installer.run())


if __name__ == "__main__":
    main()
