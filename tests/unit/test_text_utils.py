from sopmd.converter.text_utils import escape_md, normalize_text, strip_trailing_colon


def test_normalize_text_basic():
    # NBSP and runs of spaces collapse
    assert normalize_text("Hello   World\u00a0") == "Hello World"


def test_smart_punctuation():
    assert normalize_text("“Hello” – it’s") == "\"Hello\" - it's"


def test_ligature_replacement():
    assert normalize_text("ﬁeld ﬂow") == "field flow"


def test_mojibake_dash():
    assert normalize_text("Startâ€“Up") == "Start-Up"


def test_escape_md():
    assert escape_md(" a|b*c_d ") == "a\\|b\\*c\\_d"


def test_strip_trailing_colon():
    assert strip_trailing_colon("Document No. : ") == "Document No."
