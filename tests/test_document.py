"""Tests for referent.document."""

from referent.document import (
    attr,
    attr_of,
    class_contains,
    css_class,
    find_all,
    find_first,
    parse,
    tag,
    text_of,
    without,
)

HTML = """
<html><body>
  <main>
    <h1 class="title big">Main heading</h1>
    <article><h1>Article heading</h1><p>Body</p></article>
  </main>
  <span class="post-updated">edited</span>
  <time datetime="2024-03-01">Mar 1</time>
  <script>var x = 1;</script>
</body></html>
"""


class TestMatcher:
    def test_tag_within_respects_ancestor(self) -> None:
        soup = parse(HTML)
        assert text_of(find_first(soup, tag("h1", within=tag("article")))) == "Article heading"

    def test_tag_within_returns_first_in_document_order(self) -> None:
        soup = parse(HTML)
        found = [text_of(el) for el in find_all(soup, tag("h1", within=tag("main")))]
        assert found == ["Main heading", "Article heading"]

    def test_css_class_matches_whole_token(self) -> None:
        soup = parse(HTML)
        assert find_first(soup, css_class("title", tag="h1")) is not None
        assert find_first(soup, css_class("tit")) is None

    def test_class_contains_matches_substring(self) -> None:
        soup = parse(HTML)
        assert text_of(find_first(soup, class_contains("date"))) == "edited"

    def test_attr_presence_and_value(self) -> None:
        soup = parse(HTML)
        el = find_first(soup, attr("time", "datetime"))
        assert attr_of(el, "datetime") == "2024-03-01"
        assert find_first(soup, attr("time", "datetime", "1999")) is None

    def test_missing_element_reads_empty(self) -> None:
        assert text_of(None) == ""
        assert attr_of(None, "content") == ""


class TestWithout:
    def test_returns_stripped_copy_and_keeps_original(self) -> None:
        soup = parse(HTML)
        view = without(soup, [tag("script"), tag("article")])

        assert view.find("script") is None
        assert view.find("article") is None
        assert soup.find("script") is not None
        assert soup.find("article") is not None

    def test_nested_matches_are_removed_once(self) -> None:
        soup = parse('<div class="ad"><div class="ad"><p>x</p></div></div><p>kept</p>')
        view = without(soup, [css_class("ad")])
        assert [text_of(p) for p in view.find_all("p")] == ["kept"]
