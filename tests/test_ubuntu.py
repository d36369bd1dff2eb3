import pytest

from popupgrade import ubuntu
from popupgrade.ubuntu import Codename, Version, VersionError, detect_version


def test_version_parse_and_display():
    version = Version.parse("20.04")
    assert version == Version(20, 4)
    assert str(version) == "20.04"


def test_version_parse_with_patch():
    version = Version.parse("20.04.3")
    assert version.patch == 3
    assert str(version) == "20.04"


@pytest.mark.parametrize("text", ["", "focal", "20", "20.x", "20.04.1.2"])
def test_version_parse_invalid(text):
    with pytest.raises(VersionError):
        Version.parse(text)


@pytest.mark.parametrize("codename", list(Codename))
def test_codename_version_round_trip(codename):
    assert Codename.from_version(codename.to_version()) is codename


@pytest.mark.parametrize("codename", list(Codename))
def test_codename_value_round_trip(codename):
    assert Codename(str(codename)) is codename


def test_codename_from_version_string():
    assert Codename.from_version("18.04") is Codename.BIONIC
    assert Codename.from_version("22.04") is Codename.JAMMY


def test_codename_from_unknown_version():
    with pytest.raises(VersionError):
        Codename.from_version(Version(17, 4))


def test_disco_eol_date():
    assert Codename.DISCO.eol_date() == (2020, 1, 18)


def test_eol_dates_follow_release_order():
    bionic = Codename.BIONIC.eol_date()
    focal = Codename.FOCAL.eol_date()
    jammy = Codename.JAMMY.eol_date()
    assert bionic < focal
    assert focal < jammy


def test_detect_version(tmp_path, monkeypatch):
    os_release = tmp_path / "os-release"
    os_release.write_text('NAME="Pop!_OS"\nVERSION_ID="21.10"\nID=pop\n')
    monkeypatch.setattr(ubuntu, "OS_RELEASE", os_release)
    assert detect_version() == Version(21, 10)


def test_detect_version_missing_key(tmp_path, monkeypatch):
    os_release = tmp_path / "os-release"
    os_release.write_text("NAME=pop\n")
    monkeypatch.setattr(ubuntu, "OS_RELEASE", os_release)
    with pytest.raises(VersionError):
        detect_version()


def test_detect_version_missing_file(tmp_path, monkeypatch):
    monkeypatch.setattr(ubuntu, "OS_RELEASE", tmp_path / "missing")
    with pytest.raises(VersionError):
        detect_version()