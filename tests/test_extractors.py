import pytest

from outline.extractors import FrontMatterParseError, split_frontmatter


def test_text_without_frontmatter_is_untouched():
    text = "# Title\n\nJust a body.\n"
    frontmatter, body = split_frontmatter(text)
    assert frontmatter == {}
    assert body == text


def test_frontmatter_is_parsed_and_body_follows_closing_line():
    text = "---\ntitle: Hello\nlayout: post\ntags: [a, b]\n---\n# Heading\n"
    frontmatter, body = split_frontmatter(text)
    assert frontmatter == {"title": "Hello", "layout": "post", "tags": ["a", "b"]}
    assert body == "# Heading\n"


def test_opening_delimiter_must_start_the_text():
    text = "\n---\ntitle: Hello\n---\nbody"
    assert split_frontmatter(text) == ({}, text)


def test_missing_closing_delimiter_means_no_frontmatter():
    text = "---\ntitle: Hello\nno closing line here\n"
    assert split_frontmatter(text) == ({}, text)


def test_closing_delimiter_needs_trailing_newline():
    text = "---\ntitle: Hello\n---"
    assert split_frontmatter(text) == ({}, text)


def test_empty_block_yields_empty_mapping():
    frontmatter, body = split_frontmatter("---\n---\nBody text")
    assert frontmatter == {}
    assert body == "Body text"


def test_body_keeps_later_delimiter_lines():
    text = "---\ntitle: A\n---\nintro\n---\nmore\n"
    frontmatter, body = split_frontmatter(text)
    assert frontmatter == {"title": "A"}
    assert body == "intro\n---\nmore\n"


def test_invalid_yaml_degrades_to_empty_metadata(caplog):
    text = "---\ntitle: [unclosed\n---\n# Body\n"
    with caplog.at_level("WARNING", logger="outline.extractors"):
        frontmatter, body = split_frontmatter(text)
    assert frontmatter == {}
    assert body == "# Body\n"
    assert "Invalid front matter" in caplog.text


def test_non_mapping_yaml_degrades_to_empty_metadata():
    frontmatter, body = split_frontmatter("---\n- one\n- two\n---\nbody")
    assert frontmatter == {}
    assert body == "body"


def test_strict_mode_raises_on_invalid_yaml():
    with pytest.raises(FrontMatterParseError) as excinfo:
        split_frontmatter("---\ntitle: [unclosed\n---\nbody", strict=True)
    assert excinfo.value.source == "title: [unclosed\n"


def test_strict_mode_raises_on_scalar_block():
    with pytest.raises(FrontMatterParseError, match="expected a mapping, got str"):
        split_frontmatter("---\njust text\n---\nbody", strict=True)
