import fitz

from sopmd.converter.runner import main


def _write_pdf(path, *pages):
    doc = fitz.open()
    for lines in pages:
        page = doc.new_page()
        for i, text in enumerate(lines):
            page.insert_text((72, 72 + 18 * i), text, fontsize=10)
    doc.save(str(path))
    doc.close()


def test_converts_directory(tmp_path):
    src = tmp_path / "pdfs"
    src.mkdir()
    _write_pdf(src / "a.pdf", ["1.0 Purpose", "Alpha text."], ["2.0 Scope", "Alpha scope."])
    _write_pdf(src / "b.pdf", ["1.0 Purpose", "Beta text."], ["2.0 Scope", "Beta scope."])
    out = tmp_path / "md"

    assert main([str(src), "-o", str(out)]) == 0
    assert (out / "a.md").read_text(encoding="utf-8") == (
        "# a\n\n## 1.0 Purpose\n\nAlpha text.\n\n## 2.0 Scope\n\nAlpha scope.\n"
    )
    assert (out / "b.md").exists()


def test_existing_output_is_kept_without_overwrite(tmp_path):
    pdf = tmp_path / "a.pdf"
    _write_pdf(pdf, ["Alpha text."], ["Alpha scope."])
    out = tmp_path / "md"
    out.mkdir()
    (out / "a.md").write_text("keep me\n", encoding="utf-8")

    assert main([str(pdf), "-o", str(out)]) == 0
    assert (out / "a.md").read_text(encoding="utf-8") == "keep me\n"
    assert main([str(pdf), "-o", str(out), "--overwrite"]) == 0
    assert (out / "a.md").read_text(encoding="utf-8") == "# a\n\nAlpha text.\n\nAlpha scope.\n"


def test_failure_sets_exit_code(tmp_path):
    bad = tmp_path / "bad.pdf"
    bad.write_bytes(b"not a pdf at all")
    good = tmp_path / "good.pdf"
    _write_pdf(good, ["Fine."], ["Also fine."])
    out = tmp_path / "md"

    assert main([str(bad), str(good), "-o", str(out)]) == 1
    assert (out / "good.md").exists()
    assert not (out / "bad.md").exists()


def test_unwritable_output_is_reported_per_file(tmp_path):
    first = tmp_path / "first.pdf"
    second = tmp_path / "second.pdf"
    _write_pdf(first, ["First."], ["Page two."])
    _write_pdf(second, ["Second."], ["Page two."])
    # A regular file where the output directory should go.
    out = tmp_path / "md"
    out.write_text("", encoding="utf-8")

    assert main([str(first), str(second), "-o", str(out)]) == 1
    assert out.is_file()
