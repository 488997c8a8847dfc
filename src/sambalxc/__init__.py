"""
sambalxc - Samba file server in an Alpine LXC container on Proxmox VE
"""

__version__ = "0.1.0"

from .core import InstallerError, SambaLxcInstaller

__all__ = ["SambaLxcInstaller", "InstallerError"]
