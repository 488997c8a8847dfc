"""Fixed paths, modes and commands used inside the container."""

SMB_CONF_PATH = "/etc/samba/smb.conf"
SAMBA_LOG_DIR = "/var/log/samba/"
SAMBA_SERVICE = "samba"
SAMBA_PACKAGES = ("samba", "samba-common-tools", "nano")

GUEST_ACCOUNT = "nobody"
SHARE_DIR_MODE = "0775"
FORCE_CREATE_MODE = "0664"
FORCE_DIRECTORY_MODE = "0775"

WORKGROUP = "WORKGROUP"

BIND_MOUNT_KEY = "mp0"
SETTLE_DELAY_SECONDS = 5

# UID of 'nobody' (65534) as seen on the host for the default unprivileged idmap.
UNPRIVILEGED_NOBODY_HOST_UID = 165534
