import pytest

from popupgrade import recovery_version
from popupgrade.recovery_version import RecoveryVersion, RecoveryVersionError


def test_parse_version_and_build():
    parsed = RecoveryVersion.parse("20.04 12\n")
    assert parsed == RecoveryVersion("20.04", 12)


def test_parse_negative_build():
    assert RecoveryVersion.parse("21.10 -1").build == -1


@pytest.mark.parametrize(
    "text, message",
    [
        ("", "no version found in recovery version file"),
        ("20.04", "no build number found in recovery version file"),
        ("20.04 abc", "build version in recovery version file is not a number"),
        ("20.04 40000", "build version in recovery version file is not a number"),
    ],
)
def test_parse_errors(text, message):
    with pytest.raises(RecoveryVersionError) as info:
        RecoveryVersion.parse(text)
    assert str(info.value) == message


@pytest.fixture
def paths(tmp_path, monkeypatch):
    version_file = tmp_path / "version"
    release_file = tmp_path / "Release"
    monkeypatch.setattr(recovery_version, "RECOVERY_VERSION", str(version_file))
    monkeypatch.setattr(recovery_version, "RECOVERY_RELEASE", str(release_file))
    return version_file, release_file


def test_version_from_version_file(paths):
    version_file, _ = paths
    version_file.write_text("22.04 7")
    assert recovery_version.version() == RecoveryVersion("22.04", 7)
    assert recovery_version.recovery_file() == "22.04 7"


def test_version_from_release_codename(paths):
    _, release_file = paths
    release_file.write_text("Origin: Ubuntu\nCodename: focal\nSuite: stable\n")
    assert recovery_version.version() == RecoveryVersion("20.04", 0)


def test_version_unknown_codename(paths):
    _, release_file = paths
    release_file.write_text("Codename: warty\n")
    with pytest.raises(RecoveryVersionError, match="unknown release codename"):
        recovery_version.version()


def test_version_without_codename(paths):
    _, release_file = paths
    release_file.write_text("Origin: Ubuntu\nCodename:\n")
    with pytest.raises(RecoveryVersionError, match="recovery partition is corrupt"):
        recovery_version.version()


def test_version_without_any_file(paths):
    with pytest.raises(RecoveryVersionError, match="failed to read recovery version file"):
        recovery_version.version()