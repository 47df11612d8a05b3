import pytest

from ossim.randfile import RandomNumbers


def test_header_is_skipped_and_values_read_in_order():
    rng = RandomNumbers.from_text("3\n5\n7\n9\n")
    assert [rng.next() for _ in range(3)] == [5, 7, 9]


def test_wraps_around_to_first_value():
    rng = RandomNumbers.from_text("3\n5\n7\n9\n")
    first = [rng.next() for _ in range(3)]
    second = [rng.next() for _ in range(3)]
    assert first == second


def test_missing_trailing_newline_reads_every_value():
    rng = RandomNumbers.from_text("2\n11\n22")
    assert [rng.next() for _ in range(4)] == [11, 22, 11, 22]


def test_blank_lines_are_ignored():
    rng = RandomNumbers.from_text("2\n\n4\n\n8\n")
    assert len(rng) == 2
    assert [rng.next(), rng.next()] == [4, 8]


def test_empty_file_is_rejected():
    with pytest.raises(ValueError):
        RandomNumbers.from_text("0\n")


def test_non_numeric_line_is_rejected():
    with pytest.raises(ValueError):
        RandomNumbers.from_text("1\nabc\n")


def test_from_file(tmp_path):
    path = tmp_path / "rfile"
    path.write_text("2\n100\n200\n", encoding="utf-8")
    rng = RandomNumbers.from_file(path)
    assert [rng.next() for _ in range(3)] == [100, 200, 100]