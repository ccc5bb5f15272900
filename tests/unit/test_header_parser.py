from sopmd.converter.header_parser import HeaderParser, parse_header_and_title, split_combo_value
from sopmd.converter.models import Line, Page, Word


def _page(texts):
    lines = []
    for i, t in enumerate(texts):
        y = 760.0 - 14.0 * i
        words = []
        x = 40.0
        for tok in t.split():
            words.append(Word(text=tok, left=x, right=x + 5.5 * len(tok), y=y))
            x += 5.5 * len(tok) + 3.0
        lines.append(Line.from_words(y, words))
    return Page(number=1, height=792.0, lines=lines)


def test_key_only_rows_title_and_combined_date_revision():
    page = _page([
        "Document No.:",
        "CLG-EN-PR-0175",
        "Fitness Center Access",
        "Effective Date:",
        "06/08/2023 G",
    ])
    res = parse_header_and_title(page)
    assert res.metadata.doc == "CLG-EN-PR-0175"
    assert res.metadata.eff == "06/08/2023"
    assert res.metadata.rev == "G"
    assert res.title == "Fitness Center Access"
    for text in ("Document No.:", "CLG-EN-PR-0175", "Fitness Center Access", "Effective Date:", "06/08/2023 G"):
        assert res.excludes(text)


def test_multi_key_grid_rows():
    page = _page([
        "Management System",
        "Standard Operating Procedure",
        "Document No.: Page:",
        "CLG-EN-PR-0175 1 of 4",
        "Fitness Center",
        "Access (Phase 2)",
        "Effective Date: Revision:",
        "06/08/2023 G",
        "Accountable Organization: Management Approval:",
        "Facilities Jane Doe",
        "1.0 Purpose",
    ])
    res = HeaderParser().parse(page)
    meta = res.metadata
    assert meta.doc == "CLG-EN-PR-0175"
    assert (meta.eff, meta.rev) == ("06/08/2023", "G")
    assert meta.org == "Facilities"
    assert meta.appr == "Jane Doe"
    assert res.title == "Fitness Center Access (Phase 2)"
    assert res.excludes("management system")
    assert res.excludes("Facilities Jane Doe")
    assert not res.excludes("1.0 Purpose")


def test_approval_from_its_own_row():
    page = _page([
        "Accountable Organization:",
        "Facilities",
        "Management Approval:",
        "Jane Q. Doe",
    ])
    meta = parse_header_and_title(page).metadata
    assert meta.org == "Facilities"
    assert meta.appr == "Jane Q. Doe"


def test_inline_key_values_fill_missing_fields():
    page = _page([
        "Source: Corporate EHS Manual",
        "Revision: B",
        "Effective Date: 2023-06-08",
    ])
    meta = parse_header_and_title(page).metadata
    assert meta.src == "Corporate EHS Manual"
    assert meta.rev == "B"
    # not DD/MM/YYYY shaped
    assert meta.eff is None


def test_value_that_looks_like_a_key_is_rejected():
    page = _page(["Document No.: Page:", "Effective Date:"])
    res = parse_header_and_title(page)
    assert res.metadata.doc is None
    assert res.title is None


def test_no_grid_degrades_to_nothing():
    page = _page(["1.0 Purpose", "This procedure describes things."])
    res = parse_header_and_title(page)
    assert res.metadata.as_dict() == {}
    assert res.title is None
    assert res.excludes("Standard Operating Procedure")
    assert not res.excludes("1.0 Purpose")


def test_missing_first_page():
    res = parse_header_and_title(None)
    assert res.title is None
    assert res.excludes("Management System")


def test_banner_split_across_lines_is_excluded():
    page = _page(["Acme", "Standard Operating", "Procedure", "1.0 Purpose"])
    res = parse_header_and_title(page)
    assert res.excludes("Acme")
    assert res.excludes("Standard Operating")
    assert res.excludes("Procedure")
    assert not res.excludes("1.0 Purpose")


def test_banner_window_takes_three_rows_from_first_match():
    page = _page(["Acme Corp", "Standard Operating Procedure", "Intro line", "1.0 Purpose"])
    res = parse_header_and_title(page)
    assert res.excludes("Acme Corp")
    assert res.excludes("Intro line")
    assert not res.excludes("1.0 Purpose")


def test_banner_below_scan_window_is_kept():
    filler = [f"Intro {i}" for i in range(16)]
    page = _page(filler + ["Standard Operating", "Procedure"])
    res = parse_header_and_title(page)
    assert not res.excludes("Procedure")
    assert not res.excludes("Intro 15")


def test_split_combo_value():
    assert split_combo_value("06/08/2023 G") == ("06/08/2023", "G")
    assert split_combo_value("CLG-EN-PR-0175 1 of 4") == ("CLG-EN-PR-0175", "1 of 4")
    assert split_combo_value("left side   right side") == ("left side", "right side")
    assert split_combo_value("ABCDE") == ("ABCDE", "")
    assert split_combo_value("alpha beta gamma delta") == ("alpha beta", "gamma delta")
