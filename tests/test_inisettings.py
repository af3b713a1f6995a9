import pytest

from tftpkit.inisettings import read_key, save_key, section_name

_PATH = "SOFTWARE\\TFTPD32\\DHCP"

_CONTENT = (
    "[DHCP]\n"
    "LeaseTime = 2880\n"
    'Domain="lan.example.com"\n'
    "Empty=\n"
    "Odd=12abc\n"
    "Word=abc\n"
    "; a comment\n"
    "\n"
    "[TFTPD32]\n"
    "Port=69\n"
)


@pytest.fixture
def ini(tmp_path):
    path = tmp_path / "settings.ini"
    path.write_text(_CONTENT, encoding="utf-8")
    return path


def test_section_name_is_last_component():
    assert section_name(_PATH) == "DHCP"
    assert section_name("Plain") == "Plain"


def test_section_name_is_truncated():
    assert section_name("A\\" + "x" * 100) == "x" * 63


def test_read_integer(ini):
    assert read_key(_PATH, "LeaseTime", int, ini) == 2880


def test_read_string_unquoted(ini):
    assert read_key(_PATH, "Domain", str, ini) == "lan.example.com"


def test_lookup_ignores_case(ini):
    assert read_key("software\\tftpd32\\dhcp", "leasetime", int, ini) == 2880


def test_integer_read_like_atoi(ini):
    assert read_key(_PATH, "Odd", int, ini) == 12
    assert read_key(_PATH, "Word", int, ini) == 0


def test_missing_and_empty_values(ini, tmp_path):
    assert read_key(_PATH, "Empty", str, ini) is None
    assert read_key(_PATH, "Nothing", str, ini) is None
    assert read_key("X\\Other", "Port", int, ini) is None
    assert read_key(_PATH, "LeaseTime", int, tmp_path / "absent.ini") is None


def test_key_in_other_section_not_seen(ini):
    assert read_key(_PATH, "Port", int, ini) is None
    assert read_key("SOFTWARE\\TFTPD32", "Port", int, ini) == 69


def test_read_rejects_unknown_kind(ini):
    with pytest.raises(ValueError):
        read_key(_PATH, "LeaseTime", float, ini)


def test_save_updates_existing_key(ini):
    save_key(_PATH, "LeaseTime", 60, ini)
    assert read_key(_PATH, "LeaseTime", int, ini) == 60
    lines = ini.read_text(encoding="utf-8").splitlines()
    assert sum(line.lower().startswith("leasetime") for line in lines) == 1


def test_save_adds_key_to_section(ini):
    save_key(_PATH, "Gateway", "10.0.0.1", ini)
    assert read_key(_PATH, "Gateway", str, ini) == "10.0.0.1"
    assert read_key("SOFTWARE\\TFTPD32", "Gateway", str, ini) is None
    assert read_key("SOFTWARE\\TFTPD32", "Port", int, ini) == 69


def test_save_creates_section(ini):
    save_key("SOFTWARE\\TFTPD32\\SNTP", "Enabled", -1, ini)
    assert read_key("SOFTWARE\\TFTPD32\\SNTP", "Enabled", int, ini) == -1
    assert "[SNTP]" in ini.read_text(encoding="utf-8").splitlines()


def test_save_requires_existing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        save_key(_PATH, "LeaseTime", 1, tmp_path / "absent.ini")


def test_save_rejects_other_types(ini):
    with pytest.raises(TypeError):
        save_key(_PATH, "LeaseTime", 1.5, ini)