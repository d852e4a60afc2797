from bs4 import BeautifulSoup

from merger import merge
from models import Cell, TableSection


def _cell(text, tag="td"):
    soup = BeautifulSoup(f"<{tag}>{text}</{tag}>", "html.parser")
    return Cell(soup.find(tag))


def _section(head, *rows):
    return TableSection(
        head=[_cell(t, "th") for t in head],
        body=[[_cell(t) for t in row] for row in rows],
    )


def _texts(section):
    return section.texts()


def test_new_column_inserted_at_incoming_position():
    acc = _section(["Feature", "X"], ["f1", "v1"])
    new = _section(["Feature", "Y"], ["f2", "v2"])
    merge(acc, new)
    assert _texts(acc) == [
        ["Feature", "Y", "X"],
        ["f1", "N/A", "v1"],
        ["f2", "v2", "N/A"],
    ]
    assert acc.body[0][1].placeholder
    assert acc.body[1][2].placeholder


def test_accumulator_rows_come_first():
    a = _section(["C++17 feature", "GCC"], ["a1", "1"], ["a2", "2"])
    b = _section(["C++20 feature", "GCC"], ["b1", "3"])
    merge(a, b)
    assert [row[0].text() for row in a.body] == ["a1", "a2", "b1"]
    # label column always lines up
    assert _texts(a)[0] == ["C++17 feature", "GCC"]


def test_column_set_is_commutative():
    def build():
        return (_section(["F", "GCC", "Clang"], ["a", "1", "2"]),
                _section(["F", "MSVC", "GCC"], ["b", "3", "4"]))

    a, b = build()
    merge(a, b)
    b2, a2 = build()[::-1]
    merge(b2, a2)
    assert sorted(_texts(a)[0][1:]) == sorted(_texts(b2)[0][1:]) == ["Clang", "GCC", "MSVC"]


def test_merge_empty_is_noop():
    acc = _section(["Feature", "X"], ["f1", "v1"])
    before = _texts(acc)
    merge(acc, TableSection())
    merge(acc, _section(["Feature", "Y"]))
    assert _texts(acc) == before


def test_empty_accumulator_adopts_by_reference():
    acc = TableSection()
    new = _section(["Feature", "X"], ["f1", "v1"])
    merge(acc, new)
    assert acc.head is new.head
    assert acc.body is new.body


def test_reordered_columns_are_aligned():
    acc = _section(["F", "A", "B"], ["f1", "a1", "b1"])
    new = _section(["F", "B", "A"], ["f2", "b2", "a2"])
    merge(acc, new)
    assert _texts(acc) == [["F", "A", "B"], ["f1", "a1", "b1"], ["f2", "a2", "b2"]]


def test_duplicate_column_names_keep_widths_consistent():
    acc = _section(["F", "GCC", "GCC"], ["f1", "g1", "g2"])
    new = _section(["F", "GCC"], ["f2", "g3"])
    merge(acc, new)
    width = len(acc.head)
    assert width == 3
    assert all(len(row) == width for row in acc.body)
    assert _texts(acc)[2] == ["f2", "g3", "N/A"]


def test_invariant_over_many_merges():
    acc = TableSection()
    merge(acc, _section(["C++11 feature", "GCC", "Clang"], ["a", "4.8", "3.3"]))
    merge(acc, _section(["C++14 feature", "GCC", "MSVC"], ["b", "5", "19.0"]))
    merge(acc, _section(["C++17 feature", "EDG", "Clang"], ["c", "5.0", "5"]))
    merge(acc, _section(["C++20 feature", "Apple Clang"], ["d", "13"]))
    width = len(acc.head)
    assert width == 6
    assert all(len(row) == width for row in acc.body)
    assert [row[0].text() for row in acc.body] == ["a", "b", "c", "d"]
    assert _texts(acc)[0][1:] == ["Apple Clang", "EDG", "GCC", "MSVC", "Clang"]
    assert [c.placeholder for c in acc.body[3]] == [False, False, True, True, True, True]


def test_inserted_header_is_a_copy():
    acc = _section(["Feature", "X"], ["f1", "v1"])
    new = _section(["Feature", "Y"], ["f2", "v2"])
    y = new.head[1]
    merge(acc, new)
    assert acc.head[1] is not y
    assert acc.head[1].text() == "Y"


def test_custom_placeholder_label():
    acc = _section(["Feature", "X"], ["f1", "v1"])
    merge(acc, _section(["Feature", "Y"], ["f2", "v2"]), label="-")
    assert _texts(acc)[1] == ["f1", "-", "v1"]
