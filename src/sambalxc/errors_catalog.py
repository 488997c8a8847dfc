"""Actionable error catalog for sambalxc."""

from typing import Dict

_ERROR_MESSAGES: Dict[str, Dict[str, str]] = {
    "container_create_failed": {
        "what": "Could not create container {ctid}.",
        "next": "Check `pct create` output, free storage on '{storage}' and the template name.",
    },
    "template_not_found": {
        "what": "No {os} {version} template is available.",
        "next": "Run `pveam update` and `pveam available --section system` to list templates.",
    },
    "container_start_failed": {
        "what": "Container {ctid} failed to start.",
        "next": "Inspect `pct start {ctid} --debug` and the container configuration.",
    },
    "host_dir_create_failed": {
        "what": "Failed to create host path '{path}'.",
        "next": "Create it manually on the host and set its permissions.",
    },
    "bind_mount_failed": {
        "what": "Failed to configure bind mount.",
        "next": "Ensure host path '{path}' is valid.",
    },
    "samba_not_running": {
        "what": "Samba service failed to start.",
        "next": "Check logs in CT {ctid}:{log_dir}",
    },
}


def actionable_error(code: str, **kwargs: str) -> str:
    if code not in _ERROR_MESSAGES:
        raise KeyError(f"Unknown error catalog key: {code}")

    template = _ERROR_MESSAGES[code]
    what = template["what"].format(**kwargs)
    next_step = template["next"].format(**kwargs)
    return f"{what} Suggested action: {next_step}"
