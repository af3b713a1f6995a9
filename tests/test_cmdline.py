import pytest

from tftpkit.cmdline import (
    TFTP_DIR,
    TFTP_INI,
    TFTP_LOG,
    apply_command_line,
    parse_command_line,
    split_command_line,
)


@pytest.mark.parametrize(
    "line, words",
    [
        ("a b  c", ["a", "b", "c"]),
        ('"x y" z', ["x y", "z"]),
        ('"unterminated', ["unterminated"]),
        ('""', [""]),
        ('"a"b', ["a", "b"]),
        ("   ", []),
        ("", []),
    ],
)
def test_split_command_line(line, words):
    assert split_command_line(line) == words


def test_split_command_line_truncates_long_lines():
    line = "x" * 600
    assert split_command_line(line) == ["x" * 511]


def test_parse_known_options():
    settings = parse_command_line('-s "C:\\tftp root" -l log.txt')
    assert settings == {TFTP_DIR: "C:\\tftp root", TFTP_LOG: "log.txt"}


def test_parse_option_without_value_is_ignored():
    assert parse_command_line("-s") == {}


def test_parse_unknown_option_does_not_consume_value():
    assert parse_command_line("-x foo -i a.ini") == {TFTP_INI: "a.ini"}


def test_parse_option_value_may_look_like_option():
    assert parse_command_line("-s -l") == {TFTP_DIR: "-l"}


def test_parse_last_value_wins():
    assert parse_command_line("-i one.ini -i two.ini") == {TFTP_INI: "two.ini"}


def test_parse_only_second_character_matters():
    assert parse_command_line("-logfile out.log") == {TFTP_LOG: "out.log"}


def test_apply_command_line_updates_mapping():
    environ = {"OTHER": "kept"}
    result = apply_command_line("-s dir -i set.ini", environ)
    assert result == {TFTP_DIR: "dir", TFTP_INI: "set.ini"}
    assert environ == {"OTHER": "kept", TFTP_DIR: "dir", TFTP_INI: "set.ini"}