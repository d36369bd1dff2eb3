import os
import signal
import subprocess
from unittest import mock

import pytest

from popupgrade import system
from popupgrade.system import (
    ReleaseArchError,
    Signal,
    SystemEnvironment,
    current_time,
    detect_arch,
    development_releases_enabled,
    findmnt_uuid,
    init_signals,
    install_since,
    install_time,
    signal_status,
)


def test_development_releases_enabled(tmp_path, monkeypatch):
    marker = tmp_path / "devel"
    monkeypatch.setattr(system, "DEVELOPMENT_RELEASE_FILE", str(marker))
    assert development_releases_enabled() is False
    marker.touch()
    assert development_releases_enabled() is True


def test_install_time_is_in_the_past(tmp_path, monkeypatch):
    machine_id = tmp_path / "machine-id"
    machine_id.write_text("0123\n")
    monkeypatch.setattr(system, "MACHINE_ID", str(machine_id))
    assert install_time() <= current_time()
    assert install_since() >= 0


def test_install_time_missing_file(tmp_path, monkeypatch):
    monkeypatch.setattr(system, "MACHINE_ID", str(tmp_path / "missing"))
    with pytest.raises(FileNotFoundError):
        install_time()


def test_system_environment_detect(tmp_path, monkeypatch):
    efi = tmp_path / "efi"
    monkeypatch.setattr(system, "EFI_FIRMWARE_DIR", str(efi))
    assert SystemEnvironment.detect() is SystemEnvironment.LEGACY_BIOS
    efi.mkdir()
    assert SystemEnvironment.detect() is SystemEnvironment.EFI


def test_findmnt_uuid_first_line():
    completed = subprocess.CompletedProcess([], 0, stdout="abcd-1234\nextra\n")
    with mock.patch("subprocess.run", return_value=completed) as run:
        assert findmnt_uuid("/recovery") == "abcd-1234"
    assert run.call_args.args[0] == ["findmnt", "-n", "-o", "UUID", "/recovery"]


def test_findmnt_uuid_missing():
    completed = subprocess.CompletedProcess([], 1, stdout="")
    with mock.patch("subprocess.run", return_value=completed):
        with pytest.raises(FileNotFoundError):
            findmnt_uuid("/recovery")


def test_findmnt_not_installed():
    with mock.patch("subprocess.run", side_effect=FileNotFoundError("findmnt")):
        with pytest.raises(FileNotFoundError):
            findmnt_uuid("/recovery")


@pytest.fixture
def restore_handlers():
    signums = (signal.SIGHUP, signal.SIGTSTP, signal.SIGINT, signal.SIGTERM)
    saved = {signum: signal.getsignal(signum) for signum in signums}
    yield
    for signum, handler in saved.items():
        signal.signal(signum, handler)


def test_signal_labels(restore_handlers):
    init_signals()
    signal_status()
    os.kill(os.getpid(), signal.SIGTSTP)
    received = signal_status()
    assert received is Signal.TERM_STOP
    assert str(received) == "term stop"


def test_signal_is_recorded_once(restore_handlers):
    init_signals()
    signal_status()
    os.kill(os.getpid(), signal.SIGHUP)
    received = signal_status()
    assert received is Signal.HANGUP
    assert str(received) == "hangup"
    assert signal_status() is None


def _make_device(root, name, vendor):
    device = root / name
    device.mkdir()
    (device / "vendor").write_text(vendor)


def test_detect_arch_nvidia(tmp_path, monkeypatch):
    _make_device(tmp_path, "0000:00:02.0", "0x8086\n")
    _make_device(tmp_path, "0000:01:00.0", "0x10de\n")
    monkeypatch.setattr(system, "PCI_DEVICES_DIR", str(tmp_path))
    assert detect_arch() == "nvidia"


def test_detect_arch_intel(tmp_path, monkeypatch):
    _make_device(tmp_path, "0000:00:02.0", "0x8086\n")
    monkeypatch.setattr(system, "PCI_DEVICES_DIR", str(tmp_path))
    assert detect_arch() == "intel"


def test_detect_arch_bad_vendor(tmp_path, monkeypatch):
    _make_device(tmp_path, "0000:00:02.0", "garbage\n")
    monkeypatch.setattr(system, "PCI_DEVICES_DIR", str(tmp_path))
    with pytest.raises(ReleaseArchError):
        detect_arch()


def test_detect_arch_missing_directory(tmp_path, monkeypatch):
    monkeypatch.setattr(system, "PCI_DEVICES_DIR", str(tmp_path / "missing"))
    with pytest.raises(ReleaseArchError):
        detect_arch()