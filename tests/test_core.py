import pytest

import sambalxc.services.storage as storage_module
from sambalxc.core import InstallerError, SambaLxcInstaller
from sambalxc.models import ContainerHandle, ExecResult, StorageMode
from sambalxc.services.inputs import InputResolver


class FakeProvisioner:
    def __init__(self, mount_ok=True, create_error=None):
        self.mount_ok = mount_ok
        self.create_error = create_error
        self.calls = []

    def create_container(self, request):
        self.calls.append("create")
        if self.create_error:
            raise self.create_error
        return ContainerHandle(ctid="105", ip="10.0.0.5")

    def attach_bind_mount(self, handle, host_path, mount_path):
        self.calls.append("mount")
        return self.mount_ok

    def stop(self, handle):
        self.calls.append("stop")
        raise InstallerError("already stopped")

    def start(self, handle):
        self.calls.append("start")


class FakeExecutor:
    def __init__(self, healthy=True):
        self.healthy = healthy
        self.commands = []

    def exec(self, handle, command):
        self.commands.append(command)
        if command.startswith("rc-service samba status"):
            return ExecResult(success=self.healthy, returncode=0 if self.healthy else 3)
        if command == "hostname":
            return ExecResult(success=True, stdout="samba\n")
        return ExecResult(success=True)

    def run(self, handle, command):
        return self.exec(handle, command)

    def written_config(self):
        for command in self.commands:
            if command.startswith("cat <<'EOF' > /etc/samba/smb.conf"):
                return command
        return ""


class FakeFileSystem:
    def dir_exists(self, path):
        return True

    def make_dirs(self, path):
        return True


@pytest.fixture(autouse=True)
def no_settle_delay(monkeypatch):
    monkeypatch.setattr(storage_module.time, "sleep", lambda *_args, **_kwargs: None)


def build_installer(environ, provisioner=None, executor=None, dry_run=False):
    settings = InputResolver(environ=environ).resolve(dry_run=dry_run)
    return SambaLxcInstaller(
        settings=settings,
        provisioner=provisioner or FakeProvisioner(),
        executor=executor or FakeExecutor(),
        filesystem_service=FakeFileSystem(),
    )


SCENARIO_ENV = {
    "var_samba_share_name": "Data",
    "var_host_share_path": "/mnt/pve/drive",
    "var_samba_writable": "yes",
    "var_samba_guest_ok": "yes",
}


def test_bind_mounted_share_end_to_end(capsys):
    provisioner = FakeProvisioner()
    executor = FakeExecutor()
    installer = build_installer(SCENARIO_ENV, provisioner=provisioner, executor=executor)

    assert installer.run() == 0

    config = executor.written_config()
    assert "[Data]" in config
    assert "    writable = yes\n" in config
    assert "    read only = no\n" in config
    assert "    guest ok = yes\n" in config
    assert installer.storage_mode is StorageMode.ATTACHED
    assert installer.share.host_path == "/mnt/pve/drive"
    assert provisioner.calls == ["create", "mount", "stop", "start"]
    assert not any(command.startswith("chown") for command in executor.commands)
    assert "Bind-mounted from Proxmox host path '/mnt/pve/drive'" in capsys.readouterr().out


def test_bind_mount_failure_falls_back_to_internal_permissions(capsys):
    executor = FakeExecutor()
    installer = build_installer(
        SCENARIO_ENV,
        provisioner=FakeProvisioner(mount_ok=False),
        executor=executor,
    )

    assert installer.run() == 0

    assert installer.share.host_path is None
    assert "chown -R nobody:nobody /shared_data/samba_share" in executor.commands
    assert "chmod -R 0775 /shared_data/samba_share" in executor.commands
    assert "Stored inside the LXC's disk" in capsys.readouterr().out


def test_read_only_share_is_rendered():
    executor = FakeExecutor()
    installer = build_installer({"var_samba_writable": "no"}, executor=executor)

    assert installer.run() == 0

    config = executor.written_config()
    assert "    writable = no\n" in config
    assert "    read only = yes\n" in config


def test_unhealthy_samba_still_prints_summary_and_succeeds(capsys):
    installer = build_installer({}, executor=FakeExecutor(healthy=False))

    assert installer.run() == 0
    assert installer.samba_healthy is False

    output = capsys.readouterr().out
    assert "Samba service failed to start." in output
    assert "Samba Share Configuration:" in output
    assert "Completed Successfully!" in output


def test_container_creation_failure_aborts_run():
    executor = FakeExecutor()
    provisioner = FakeProvisioner(create_error=InstallerError("Could not create container 105."))
    installer = build_installer({}, provisioner=provisioner, executor=executor)

    assert installer.run() == 1
    assert executor.commands == []


def test_steps_run_in_order():
    executor = FakeExecutor()
    installer = build_installer({}, executor=executor)

    installer.run()

    prefixes = [command.split()[0] for command in executor.commands]
    assert prefixes == [
        "mkdir",
        "apk",
        "hostname",
        "cat",
        "chown",
        "chmod",
        "rc-update",
        "rc-service",
        "rc-service",
    ]


def test_dry_run_does_not_touch_host(capsys):
    provisioner = FakeProvisioner()
    executor = FakeExecutor()
    installer = build_installer(SCENARIO_ENV, provisioner=provisioner, executor=executor, dry_run=True)

    assert installer.run() == 0
    assert provisioner.calls == []
    assert executor.commands == []
    assert "Data" in capsys.readouterr().out


def test_dry_run_prints_bracketed_paths_literally(capsys):
    environ = {"var_host_share_path": "/mnt/pve/[/old]", "var_lxc_share_path": "/srv/[backup]"}
    installer = build_installer(environ, dry_run=True)

    assert installer.run() == 0

    output = capsys.readouterr().out
    assert "/mnt/pve/[/old]" in output
    assert "/srv/[backup]" in output
