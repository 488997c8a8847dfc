"""Configuration loader for sambalxc."""

from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from sambalxc.errors import InstallerError


class ConfigLoader:
    """Loads YAML configuration files for CLI defaults."""

    SUPPORTED_KEYS = {
        "tags",
        "cpu",
        "ram",
        "disk",
        "os",
        "version",
        "unprivileged",
        "hostname",
        "storage",
        "template_storage",
        "bridge",
        "share_name",
        "host_share_path",
        "lxc_share_path",
        "guest_ok",
        "writable",
        "macos_compat",
        "verbose",
        "log_file",
        "dry_run",
    }

    BOOLEAN_KEYS = {"verbose", "dry_run"}

    def load(self, config_path: Optional[str]) -> Dict[str, Any]:
        if not config_path:
            return {}

        path = Path(config_path)
        if not path.exists():
            raise InstallerError(f"Config file not found: {config_path}")

        try:
            parsed = yaml.safe_load(path.read_text(encoding="utf-8"))
        except (yaml.YAMLError, OSError) as exc:
            raise InstallerError(f"Invalid config file '{config_path}': {exc}") from exc

        if parsed is None:
            return {}
        if not isinstance(parsed, dict):
            raise InstallerError("Config file must contain a YAML mapping at the root.")

        unknown = sorted(set(parsed.keys()) - self.SUPPORTED_KEYS)
        if unknown:
            unknown_list = ", ".join(unknown)
            raise InstallerError(f"Unknown configuration keys: {unknown_list}")

        return {key: self.normalize(key, value) for key, value in parsed.items()}

    def normalize(self, key: str, value: Any) -> Any:
        """Coerce a parsed YAML value to the string form the CLI would pass.

        Integers become strings. Floats are refused because YAML already
        dropped information from them (`version: 3.20` loads as 3.2).
        """
        if value is None or isinstance(value, (bool, str)):
            return value
        if key == "tags" and isinstance(value, list):
            return value
        if isinstance(value, int):
            return value if key in self.BOOLEAN_KEYS else str(value)
        raise InstallerError(
            f"Invalid value for '{key}' in config file: {value!r}. "
            "Quote the value in the YAML file so it is read as text."
        )
