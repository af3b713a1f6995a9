import pytest

from tftpkit.dump import bin_dump, dump_lines


def test_empty_message_without_prefix():
    assert dump_lines(b"") == [" Empty Message"]


def test_empty_message_with_prefix():
    assert dump_lines(b"", "RX") == ["RX Empty Message"]


def test_one_line_per_sixteen_bytes():
    assert len(dump_lines(bytes(16))) == 1
    assert len(dump_lines(bytes(17))) == 2
    assert len(dump_lines(bytes(48))) == 3


def test_short_line_content():
    line = dump_lines(b"ABC")[0]
    assert line.startswith(" 41 42 43 ")
    assert line.endswith("  ABC")


def test_separator_before_ninth_byte():
    line = dump_lines(bytes(range(0x30, 0x40)))[0]
    assert " 37 - 38 " in line


def test_non_printable_bytes_shown_as_dots():
    line = dump_lines(b"\x00A\x7f\xff\n")[0]
    assert line.endswith("  .A...")


def test_prefix_is_truncated():
    prefix = "P" * 30
    line = dump_lines(b"x", prefix)[0]
    assert line.startswith("P" * 19 + " 78")
    assert not line.startswith("P" * 20)


def test_ascii_column_reassembles_input():
    data = b"Hello, TFTP world! 0123456789"
    text = "".join(line.rpartition("  ")[2] for line in dump_lines(data))
    assert text == data.decode("ascii")


def test_bin_dump_writes_lines_with_newlines():
    written = []
    bin_dump(b"0123456789abcdefXYZ", "TX", written.append)
    assert written == [line + "\n" for line in dump_lines(b"0123456789abcdefXYZ", "TX")]
    assert len(written) == 2


def test_bin_dump_defaults_to_stderr(capsys):
    bin_dump(b"", "ERR")
    assert capsys.readouterr().err == "ERR Empty Message\n"