# referent/document.py
"""
Thin query layer over BeautifulSoup.

Documents are parsed with lxml, which closes implied end tags (an open <p>
ends where the next <p> starts) the way browsers do.

Heuristic tables describe *where* to look with Locator records; a single
matcher interprets them, so the tables stay free of selector strings.
"""

import copy
from dataclasses import dataclass
from typing import Iterator, Optional, Tuple

from bs4 import BeautifulSoup, Tag


@dataclass(frozen=True)
class Locator:
    tag: Optional[str] = None
    css_class: Optional[str] = None          # whole class token, like ".title"
    class_contains: Optional[str] = None     # substring of the class attribute
    attr: Optional[Tuple[str, Optional[str]]] = None  # (name, value); value None means "present"
    within: Optional["Locator"] = None       # ancestor the element must sit in


def tag(name, within=None):
    return Locator(tag=name, within=within)


def css_class(name, tag=None, within=None):
    return Locator(tag=tag, css_class=name, within=within)


def class_contains(fragment):
    return Locator(class_contains=fragment)


def attr(tag, name, value=None):
    return Locator(tag=tag, attr=(name, value))


def parse(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "lxml")


def _classes(el: Tag):
    classes = el.get("class") or []
    if isinstance(classes, str):
        classes = classes.split()
    return classes


def matches(el: Tag, loc: Locator) -> bool:
    if not isinstance(el, Tag):
        return False
    if loc.tag and el.name != loc.tag:
        return False
    if loc.css_class and loc.css_class not in _classes(el):
        return False
    if loc.class_contains and loc.class_contains not in " ".join(_classes(el)):
        return False
    if loc.attr:
        name, value = loc.attr
        if not el.has_attr(name):
            return False
        if value is not None and el.get(name) != value:
            return False
    return True


def find_all(root: Tag, loc: Locator) -> Iterator[Tag]:
    """Yield matching descendants of root in document order."""
    for el in root.find_all(loc.tag or True):
        if not matches(el, loc):
            continue
        if loc.within is not None and not any(matches(p, loc.within) for p in el.parents):
            continue
        yield el


def find_first(root: Tag, loc: Locator) -> Optional[Tag]:
    return next(find_all(root, loc), None)


def text_of(el: Optional[Tag]) -> str:
    if el is None:
        return ""
    return el.get_text().strip()


def attr_of(el: Optional[Tag], name: str) -> str:
    if el is None:
        return ""
    value = el.get(name) or ""
    if isinstance(value, list):
        value = " ".join(value)
    return value.strip()


def without(soup: BeautifulSoup, locators) -> BeautifulSoup:
    """Return a copy of soup with every element matched by locators removed."""
    view = copy.copy(soup)
    for loc in locators:
        for el in list(find_all(view, loc)):
            if not el.decomposed:
                el.decompose()
    return view
