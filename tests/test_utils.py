from pathlib import Path

from outline.content import load_document
from outline.utils import is_html, is_markdown, output_path_for


def test_file_type_checks():
    assert is_markdown(Path("post.md"))
    assert is_markdown(Path("POST.MD"))
    assert not is_markdown(Path("notes.txt"))
    assert not is_markdown(Path("post.md.bak"))
    assert is_html(Path("index.html"))
    assert not is_html(Path("layout.html.jinja"))


def test_output_path_for():
    assert output_path_for(Path("docs/intro.md")) == Path("docs/intro.html")


def test_load_document(tmp_path):
    path = tmp_path / "page.md"
    path.write_text("---\ntitle: 42\nlayout: wide\n---\nBody\n", encoding="utf-8")
    document = load_document(path)
    assert document.path == path
    assert document.body == "Body\n"
    assert document.title == "42"
    assert document.layout == "wide"


def test_load_document_without_frontmatter(tmp_path):
    path = tmp_path / "page.md"
    path.write_text("Body only", encoding="utf-8")
    document = load_document(path)
    assert document.frontmatter == {}
    assert document.title is None
    assert document.layout is None
