import pytest

from popupgrade import recovery_conf
from popupgrade.errors import ReleaseError, ReleaseErrorKind
from popupgrade.recovery_conf import EnvFile


@pytest.fixture
def conf(tmp_path, monkeypatch):
    path = tmp_path / "recovery.conf"
    path.write_text("HOSTNAME=pop-os\nMODE=refresh\nPREV_BOOT=Pop_OS-current\n")
    monkeypatch.setattr(recovery_conf, "RECOVERY_CONF", str(path))
    return path


def test_load_and_get(conf):
    envfile = EnvFile.load(conf)
    assert envfile.get("MODE") == "refresh"
    assert envfile.get("MISSING") is None


def test_quoted_values_and_comments(tmp_path):
    path = tmp_path / "env"
    path.write_text('# comment\n\nLANG="en US"\n')
    assert EnvFile.load(path).store == {"LANG": "en US"}


def test_update_write_round_trip(conf):
    envfile = EnvFile.load(conf).update("MODE", "upgrade").update("EXTRA", "1")
    envfile.write()
    assert EnvFile.load(conf).store == envfile.store


def test_remove(conf):
    envfile = EnvFile.load(conf)
    assert envfile.remove("MODE") == "refresh"
    assert envfile.remove("MODE") is None
    assert "MODE" not in envfile.store


def test_mode_is(conf):
    assert recovery_conf.mode_is("refresh") is True
    assert recovery_conf.mode_is("upgrade") is False


def test_mode_is_missing_file(tmp_path, monkeypatch):
    monkeypatch.setattr(recovery_conf, "RECOVERY_CONF", str(tmp_path / "missing.conf"))
    with pytest.raises(ReleaseError) as info:
        recovery_conf.mode_is("refresh")
    assert info.value.kind is ReleaseErrorKind.RECOVERY_CONF_OPEN


def test_mode_set(conf):
    recovery_conf.mode_set("upgrade", "Pop_OS-other")
    envfile = EnvFile.load(conf)
    assert envfile.get("MODE") == "upgrade"
    assert envfile.get("PREV_BOOT") == "Pop_OS-other"
    assert recovery_conf.mode_is("upgrade")


def test_mode_unset_keeps_other_keys(conf):
    recovery_conf.mode_unset()
    assert EnvFile.load(conf).store == {"HOSTNAME": "pop-os"}


@pytest.fixture
def boot(tmp_path, monkeypatch):
    loader = tmp_path / "systemd-bootx64.efi"
    loader.write_text("")
    loader_path = tmp_path / "loader"
    loader_path.mkdir()
    mounts = tmp_path / "mounts"
    mounts.write_text("/dev/sda2 /recovery vfat rw 0 0\n")
    monkeypatch.setattr(recovery_conf, "SYSTEMD_BOOT_LOADER", str(loader))
    monkeypatch.setattr(recovery_conf, "SYSTEMD_BOOT_LOADER_PATH", str(loader_path))
    monkeypatch.setattr(recovery_conf, "PROC_MOUNTS", str(mounts))
    return loader, loader_path, mounts


def test_upgrade_prereq_met(boot):
    assert recovery_conf.upgrade_prereq() is None


def test_upgrade_prereq_missing_loader(boot):
    boot[0].unlink()
    with pytest.raises(ReleaseError) as info:
        recovery_conf.upgrade_prereq()
    assert info.value.kind is ReleaseErrorKind.SYSTEMD_BOOT_LOADER_NOT_FOUND


def test_upgrade_prereq_missing_loader_path(boot):
    boot[1].rmdir()
    with pytest.raises(ReleaseError) as info:
        recovery_conf.upgrade_prereq()
    assert info.value.kind is ReleaseErrorKind.SYSTEMD_BOOT_EFI_PATH_NOT_FOUND


def test_upgrade_prereq_unreadable_mounts(boot):
    boot[2].unlink()
    with pytest.raises(ReleaseError) as info:
        recovery_conf.upgrade_prereq()
    assert info.value.kind is ReleaseErrorKind.READING_PARTITIONS


def test_upgrade_prereq_no_recovery_mount(boot):
    boot[2].write_text("/dev/sda3 / ext4 rw 0 0\n")
    with pytest.raises(ReleaseError) as info:
        recovery_conf.upgrade_prereq()
    assert info.value.kind is ReleaseErrorKind.RECOVERY_NOT_FOUND