from sopmd.converter.models import HeadingBlock, ParagraphBlock, TableBlock
from sopmd.converter.post_processing import render_markdown


def test_title_is_the_only_level_one_heading():
    md = render_markdown("Fitness Center Access", [HeadingBlock(level=2, text="1.0 Purpose")])
    lines = md.splitlines()
    assert lines[0] == "# Fitness Center Access"
    assert sum(1 for ln in lines if ln.startswith("# ")) == 1
    assert "## 1.0 Purpose" in lines


def test_blocks_are_separated_by_blank_lines_and_end_with_one_newline():
    md = render_markdown(
        "T",
        [
            HeadingBlock(level=4, text="6.1.2 Calibrate"),
            ParagraphBlock(text="Use pump_a for *all* runs | always."),
            TableBlock(rows=[["Step", "Responsibility", "Action"], ["1", "Tech", "Inspect"]]),
        ],
    )
    assert md == (
        "# T\n"
        "\n"
        "#### 6.1.2 Calibrate\n"
        "\n"
        "Use pump\\_a for \\*all\\* runs \\| always.\n"
        "\n"
        "| Step | Responsibility | Action |\n"
        "| --- | --- | --- |\n"
        "| 1 | Tech | Inspect |\n"
    )


def test_title_only_document():
    assert render_markdown("doc_name", []) == "# doc\\_name\n"
