import pytest

from intcode_sim.tools.program_loader import (
    format_program,
    load_programs,
    parse_program,
    parse_programs,
)


def test_parse_program():
    assert parse_program("1,9,10,3,2,3,11,0,99,30,40,50") == [1, 9, 10, 3, 2, 3, 11, 0, 99, 30, 40, 50]
    assert parse_program(" 109, -1 ,\t204,-1 ") == [109, -1, 204, -1]


@pytest.mark.parametrize("line", ["1,,2", "1,2,", "1,x,3", "0x10,1"])
def test_parse_program_rejects_bad_words(line):
    with pytest.raises(ValueError):
        parse_program(line)


def test_one_program_per_line(tmp_path):
    path = tmp_path / "input.txt"
    path.write_text("3,0,4,0,99\n\n104,1125899906842624,99\n", encoding="utf-8")
    assert load_programs(path) == [[3, 0, 4, 0, 99], [104, 1125899906842624, 99]]
    assert parse_programs("") == []


def test_format_program():
    assert format_program([3, -1, 99]) == "3,-1,99"
