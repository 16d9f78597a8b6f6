# referent/extractor.py
"""
Article extraction: title, publication date and body text from arbitrary HTML.

Each field is resolved from an ordered table of tiers; the first tier that
yields something wins and later tiers are never consulted. Title and date are
read from the document as parsed, content from a copy with page chrome removed.
"""

import logging
from dataclasses import asdict, dataclass
from typing import Optional
from urllib.parse import urlparse

from . import config
from .dates import format_date, looks_like_date
from .document import (
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
from .errors import EmptyContent, ErrorCode, InternalError, InvalidInput
from .scraper import fetch_url

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())

PARAGRAPH_SEPARATOR = "\n\n"

# (locator, attribute to read; None reads the text)
TITLE_TIERS = (
    (tag("h1", within=tag("article")), None),
    (css_class("post-title"), None),
    (css_class("article-title"), None),
    (css_class("entry-title"), None),
    (css_class("title", tag="h1"), None),
    (tag("h1", within=css_class("content")), None),
    (tag("h1", within=tag("main")), None),
    (tag("h1"), None),
    (attr("meta", "property", "og:title"), "content"),
    (tag("title"), None),
)

# machine-readable sources, normalized with format_date
STRUCTURED_DATE_TIERS = (
    (attr("time", "datetime"), "datetime"),
    (attr("meta", "property", "article:published_time"), "content"),
    (attr("meta", "name", "date"), "content"),
    (attr("meta", "name", "pubdate"), "content"),
)

# free text, gated by looks_like_date; class substrings from config go last
TEXT_DATE_TIERS = (
    css_class("post-date"),
    css_class("article-date"),
    css_class("entry-date"),
    css_class("published"),
    css_class("date"),
)

NOISE = (
    tag("script"),
    tag("style"),
    tag("nav"),
    tag("header"),
    tag("footer"),
    tag("aside"),
    css_class("sidebar"),
    css_class("comments"),
    css_class("advertisement"),
    css_class("ad"),
    css_class("social-share"),
    css_class("related-posts"),
)

CONTENT_CONTAINERS = (
    tag("article"),
    attr(None, "role", "article"),
    css_class("post-content"),
    css_class("article-content"),
    css_class("entry-content"),
    css_class("content"),
    css_class("post-body"),
    css_class("article-body"),
    tag("main"),
    css_class("main-content"),
)


@dataclass(frozen=True)
class ParsedArticle:
    date: Optional[str] = None
    title: Optional[str] = None
    content: Optional[str] = None

    def is_usable(self, min_length: Optional[int] = None) -> bool:
        min_length = config.MIN_CONTENT_LENGTH if min_length is None else min_length
        return bool(self.content) and len(self.content.strip()) >= min_length

    def to_dict(self) -> dict:
        return asdict(self)


def _soup(document):
    return parse(document) if isinstance(document, str) else document


def _read(el, source):
    return text_of(el) if source is None else attr_of(el, source)


def resolve_title(document) -> Optional[str]:
    soup = _soup(document)
    for i, (loc, source) in enumerate(TITLE_TIERS, 1):
        value = _read(find_first(soup, loc), source)
        if value:
            logger.debug("title from tier %d", i)
            return value
    return None


def resolve_date(document, substrings=None, locale: Optional[str] = None) -> Optional[str]:
    soup = _soup(document)
    for i, (loc, source) in enumerate(STRUCTURED_DATE_TIERS, 1):
        value = attr_of(find_first(soup, loc), source)
        if value:
            logger.debug("date from structured tier %d", i)
            return format_date(value, locale)

    substrings = config.DATE_CLASS_SUBSTRINGS if substrings is None else substrings
    tiers = TEXT_DATE_TIERS + tuple(class_contains(s) for s in substrings)
    for loc in tiers:
        text = text_of(find_first(soup, loc))
        if text and looks_like_date(text):
            logger.debug("date from text tier %s", loc)
            return text
    return None


def _paragraphs(root, min_length):
    texts = (text_of(p) for p in find_all(root, tag("p")))
    return [t for t in texts if len(t) > min_length]


def resolve_content(
    document, container_min: Optional[int] = None, fallback_min: Optional[int] = None
) -> Optional[str]:
    container_min = config.CONTAINER_PARAGRAPH_MIN if container_min is None else container_min
    fallback_min = config.FALLBACK_PARAGRAPH_MIN if fallback_min is None else fallback_min

    view = without(_soup(document), NOISE)

    for loc in CONTENT_CONTAINERS:
        container = find_first(view, loc)
        if container is None:
            continue
        paragraphs = _paragraphs(container, container_min)
        if paragraphs:
            logger.debug("content from container %s (%d paragraphs)", loc, len(paragraphs))
            return PARAGRAPH_SEPARATOR.join(paragraphs)

    paragraphs = _paragraphs(view, fallback_min)
    if paragraphs:
        logger.debug("content from page-wide fallback (%d paragraphs)", len(paragraphs))
        return PARAGRAPH_SEPARATOR.join(paragraphs)
    return None


def parse_html(html: str) -> ParsedArticle:
    """Run every resolver over one document. No validation."""
    soup = parse(html)
    return ParsedArticle(
        date=resolve_date(soup),
        title=resolve_title(soup),
        content=resolve_content(soup),
    )


def _extract(html: str, source: str) -> ParsedArticle:
    try:
        article = parse_html(html)
    except Exception as e:
        logger.exception("Parse error for %s", source)
        raise InternalError(str(e)) from e

    if not article.is_usable():
        length = len(article.content.strip()) if article.content else 0
        logger.warning("Not enough content in %s (%d chars)", source, length)
        raise EmptyContent(f"content length {length} < {config.MIN_CONTENT_LENGTH}")
    return article


def extract_from_html(html: str) -> ParsedArticle:
    """Extract an article from HTML the caller already has."""
    if not html or not html.strip():
        raise InvalidInput("no HTML supplied", code=ErrorCode.CONTENT_REQUIRED)
    return _extract(html, "<html>")


def validate_url(url: str) -> str:
    if not url or not url.strip():
        raise InvalidInput("no URL supplied", code=ErrorCode.URL_REQUIRED)
    url = url.strip()
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise InvalidInput(f"not an absolute http(s) URL: {url!r}")
    return url


def extract_article(url: str, timeout: Optional[float] = None, cancel=None) -> ParsedArticle:
    """
    Fetch url and extract its article.

    Returns a ParsedArticle with usable content or raises an ExtractionError
    subclass: InvalidInput, FetchTimeout, NetworkError, UpstreamHttpError,
    FetchCancelled, EmptyContent or InternalError.
    """
    url = validate_url(url)
    html = fetch_url(url, timeout=timeout, cancel=cancel)
    if not html.strip():
        raise EmptyContent(f"{url}: empty response body")
    return _extract(html, url)
