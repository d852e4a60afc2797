from bs4 import BeautifulSoup

from config import PROFILES
from models import Cell, SupportReport, TableSection
from render import build_fragment, inject, render_section


def _cells(html, tag="td"):
    soup = BeautifulSoup(f"<table><tr>{html}</tr></table>", "html.parser")
    return [Cell(t) for t in soup.find_all(tag)]


def _section():
    head = _cells("<th>C++17 feature</th><th>GCC</th><th>Clang</th>", "th")
    shared = _cells('<td rowspan="2">std::optional</td>')[0]
    r1 = [shared] + _cells("<td>7</td><td>4</td>")
    r2 = [shared] + _cells("<td>7.1</td>") + [Cell.make_placeholder()]
    return TableSection(head=head, body=[r1, r2])


def test_render_section_recollapses_spans():
    table = render_section(_section())
    assert table.name == "table"
    assert "support-info-table" in table["class"]
    rows = table.find_all("tr")
    assert [c.get_text() for c in rows[0].find_all(["td", "th"])] == ["Feature", "GCC", "Clang"]
    first = rows[1].find_all("td")
    assert first[0].get_text() == "std::optional"
    assert first[0]["rowspan"] == "2"
    second = rows[2].find_all("td")
    assert [c.get_text() for c in second] == ["7.1", "N/A"]
    assert "table-na" in second[1]["class"]
    assert "background" in second[1]["style"]


def test_render_does_not_touch_section():
    section = _section()
    render_section(section)
    assert section.head[0].text() == "C++17 feature"


def test_render_colspan_block():
    wide = _cells('<td colspan="2">7</td>')[0]
    section = TableSection(head=_cells("<th>F</th><th>GCC</th><th>GCC libstdc++</th>", "th"),
                           body=[_cells("<td>a</td>") + [wide, wide]])
    cells = render_section(section).find_all("tr")[1].find_all("td")
    assert len(cells) == 2
    assert cells[1]["colspan"] == "2"


def test_render_empty_section():
    table = render_section(TableSection())
    assert table.find_all("tr") == []


def test_fragment_only_with_content():
    report = SupportReport(lang="cpp", revisions=["17", "20"])
    assert build_fragment(report, PROFILES["cpp"]) is None

    report.library = _section()
    fragment = build_fragment(report, PROFILES["cpp"])
    assert fragment.find("h3").get_text() == "Support status"
    assert "C++17, C++20" in fragment.find("p").get_text()
    assert len(fragment.find_all("table")) == 1


def test_inject_appends_to_content():
    page = BeautifulSoup('<html><body><div id="mw-content-text"><p>x</p></div></body></html>',
                         "html.parser")
    fragment = page.new_tag("div")
    fragment["class"] = ["support-info"]
    assert inject(page, fragment)
    assert page.select_one("#mw-content-text").contents[-1] is fragment

    bare = BeautifulSoup("<html><body></body></html>", "html.parser")
    assert not inject(bare, bare.new_tag("div"))
