"""Host filesystem helpers for sambalxc."""

import logging
import os


class FileSystemService:
    """Encapsulates host directory side effects."""

    def __init__(self, logger: logging.Logger):
        self.logger = logger

    def dir_exists(self, path: str) -> bool:
        return os.path.isdir(path)

    def make_dirs(self, path: str) -> bool:
        try:
            os.makedirs(path, exist_ok=True)
        except OSError as exc:
            self.logger.debug("Could not create %s: %s", path, exc)
            return False
        self.logger.debug("Created directory: %s", path)
        return True
