import pytest

from ossim.linker import ParseError, link, main

SAMPLE = """1 xy 2
2 z xy
5 R 1004  I 5678 E 2000 R 8002 E 7001
0
1 z
6 R 8001 E 1000 E 1000 E 3000 R 1002 A 1010
0
1 z
2 R 5001 E 4000
1 z 2
2 xy z
3 A 8000 E 1001 E 2000
"""


def _memory_lines(output):
    return [line for line in output.splitlines() if line[:3].isdigit() and line[3] == ":"]


def test_sample_listing():
    expected = (
        "Symbol Table\n"
        "xy=2\n"
        "z=15\n"
        "\n"
        "Memory Map\n"
        "000: 1004\n"
        "001: 5678\n"
        "002: 2015\n"
        "003: 8002\n"
        "004: 7002\n"
        "005: 8006\n"
        "006: 1015\n"
        "007: 1015\n"
        "008: 3015\n"
        "009: 1007\n"
        "010: 1010\n"
        "011: 5012\n"
        "012: 4015\n"
        "013: 8000\n"
        "014: 1015\n"
        "015: 2002\n"
        "\n"
        "\n"
    )
    assert link(SAMPLE) == expected


def test_memory_map_has_one_line_per_instruction():
    lines = _memory_lines(link(SAMPLE))
    assert len(lines) == 5 + 6 + 2 + 3
    assert [line[:3] for line in lines] == [f"{i:03d}" for i in range(16)]


def test_empty_input():
    assert link("") == "Symbol Table\n\nMemory Map\n\n\n"


def test_immediate_passes_through():
    assert "000: 5678" in link("0 0 1 I 5678\n").splitlines()


def test_illegal_opcode():
    out = link("0 0 1 R 10000\n").splitlines()
    assert "000: 9999 Error: Illegal opcode; treated as 9999" in out


def test_illegal_immediate():
    out = link("0 0 1 I 10000\n").splitlines()
    assert "000: 9999 Error: Illegal immediate value; treated as 9999" in out


def test_absolute_exceeds_machine_size():
    out = link("0 0 1 A 1600\n").splitlines()
    assert "000: 1000 Error: Absolute address exceeds machine size; zero used" in out


def test_relative_exceeds_module_size():
    out = link("0 0 1 R 1005\n").splitlines()
    assert "000: 1000 Error: Relative address exceeds module size; zero used" in out


def test_external_exceeds_uselist():
    out = link("0 0 1 E 1000\n").splitlines()
    expected = (
        "000: 1000 Error: External address exceeds length of uselist; "
        "treated as immediate"
    )
    assert expected in out


def test_undefined_symbol_counts_as_used():
    out = link("0 1 q 1 E 3000\n").splitlines()
    assert "000: 3000 Error: q is not defined; zero used" in out
    assert not any("appeared in the uselist" in line for line in out)


def test_uselist_symbol_not_used():
    out = link("0 1 q 1 I 5\n").splitlines()
    assert (
        "Warning: Module 1: q appeared in the uselist but was not actually used" in out
    )


def test_defined_but_never_used():
    out = link("1 a 0 0 1 I 5\n").splitlines()
    assert "Warning: Module 1: a was defined but never used" in out


def test_used_definition_has_no_warning():
    out = link("1 a 0 1 a 1 E 1000\n")
    assert "never used" not in out
    assert "a=0" in out.splitlines()


def test_multiply_defined_keeps_first_value():
    out = link("2 a 0 a 1 0 2 I 1 I 2\n").splitlines()
    assert (
        "a=0 Error: This variable is multiple times defined; first value used" in out
    )


def test_definition_too_big():
    out = link("1 a 7 0 1 I 1\n").splitlines()
    assert out[0] == "Warning: Module 1: a to big 7 (max=0) assume zero relative"
    assert "a=0" in out


def test_missing_number_at_end():
    with pytest.raises(ParseError) as info:
        link("1 xy\n")
    assert info.value.code == "NUM_EXPECTED"
    assert (info.value.line, info.value.offset) == (1, 5)


def test_symbol_expected():
    with pytest.raises(ParseError) as info:
        link("1 5xy 2\n")
    assert info.value.code == "SYM_EXPECTED"
    assert (info.value.line, info.value.offset) == (1, 3)
    assert str(info.value) == "Parse Error line 1 offset 3: SYM_EXPECTED"


def test_symbol_too_long():
    with pytest.raises(ParseError) as info:
        link("1 abcdefghijklmnopq 0 0 0\n")
    assert info.value.code == "SYM_TOLONG"


def test_too_many_definitions():
    with pytest.raises(ParseError) as info:
        link("17 a 1\n")
    assert info.value.code == "TO_MANY_DEF_IN_MODULE"


def test_too_many_uses():
    with pytest.raises(ParseError) as info:
        link("0 17 a\n")
    assert info.value.code == "TO_MANY_USE_IN_MODULE"


def test_too_many_instructions():
    with pytest.raises(ParseError) as info:
        link("0 0 513 I 1\n")
    assert info.value.code == "TO_MANY_INSTR"


def test_address_type_expected():
    with pytest.raises(ParseError) as info:
        link("0 0 1 Q 5\n")
    assert info.value.code == "ADDR_EXPECTED"


def test_error_on_second_line():
    with pytest.raises(ParseError) as info:
        link("0\n0\n1 I x\n")
    assert info.value.code == "NUM_EXPECTED"
    assert info.value.line == 3


def test_parse_error_keeps_earlier_warnings():
    with pytest.raises(ParseError) as info:
        link("1 a 7 0 1 I 1\n0 0 1 Q 5\n")
    assert "a to big 7" in info.value.preceding


def test_main_prints_listing(tmp_path, capsys):
    path = tmp_path / "input.txt"
    path.write_text(SAMPLE)
    assert main([str(path)]) == 0
    assert capsys.readouterr().out == link(SAMPLE)


def test_main_reports_parse_error(tmp_path, capsys):
    path = tmp_path / "input.txt"
    path.write_text("1 5xy 2\n")
    assert main([str(path)]) == 1
    assert "Parse Error line 1 offset 3: SYM_EXPECTED" in capsys.readouterr().out


def test_main_missing_file(tmp_path, capsys):
    missing = tmp_path / "absent.txt"
    assert main([str(missing)]) == 1
    assert f"Not a valid inputfile <{missing}>" in capsys.readouterr().out


def test_main_without_arguments(capsys):
    assert main([]) == 1
    assert "Expected argument after options" in capsys.readouterr().out