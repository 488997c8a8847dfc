"""Domain errors for sambalxc."""


class InstallerError(RuntimeError):
    """Raised when the installation cannot continue safely."""
