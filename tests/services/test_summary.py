from sambalxc.models import ContainerHandle, ShareConfig
from sambalxc.services.summary import SummaryService


class RecordingConsole:
    def __init__(self):
        self.lines = []

    def print(self, *args, **_kwargs):
        self.lines.append(" ".join(str(arg) for arg in args))


def _text(lines):
    return "\n".join(lines)


def test_bind_mounted_summary_with_ip():
    service = SummaryService(console=RecordingConsole())
    share = ShareConfig(name="Data", mount_path="/shared_data/samba_share", host_path="/mnt/pve/drive")

    text = _text(service.build_lines(ContainerHandle(ctid="105", ip="10.0.0.5"), share, "samba"))

    assert "\\\\10.0.0.5\\Data" in text
    assert "Bind-mounted from Proxmox host path '/mnt/pve/drive'" in text
    assert "Mounted inside LXC at:" in text
    assert "GUEST access" in text
    assert "smbpasswd" not in text


def test_internal_summary_without_ip_and_authenticated_access():
    service = SummaryService(console=RecordingConsole())
    share = ShareConfig(name="Data", mount_path="/shared_data/samba_share", guest_ok=False)

    text = _text(service.build_lines(ContainerHandle(ctid="105"), share, "samba"))

    assert "<LXC_IP_ADDRESS>" in text
    assert "(IP address not detected by script)" in text
    assert "Stored inside the LXC's disk at '/shared_data/samba_share'" in text
    assert "pct exec 105 -- smbpasswd -a" in text


def test_print_summary_ends_with_completion_message():
    console = RecordingConsole()
    share = ShareConfig(name="Data", mount_path="/srv")

    SummaryService(console=console).print_summary(ContainerHandle(ctid="105"), share, "samba")

    assert "Completed Successfully!" in console.lines[-1]
