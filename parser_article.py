from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Tuple

from bs4 import BeautifulSoup

from config import SourceConfig
from filters import absolute_url, clean_line, clean_text, is_absolute_url

REGION_MIN_PARAGRAPH_CHARS = 20
PAGE_MIN_PARAGRAPH_CHARS = 30
PAGE_MAX_PARAGRAPHS = 5

IMAGE_ATTRS = ("content", "src", "data-src", "data-lazy-src")


@dataclass
class ArticleParts:
    title: str = ""
    content: str = ""
    image_url: str = ""
    content_source: str = ""
    image_source: str = ""


def parse_html(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "lxml")


def extract_listing(html: str, source: SourceConfig) -> List[Tuple[str, str]]:
    """Return (title, absolute url) pairs in page order for a listing page."""
    soup = parse_html(html)
    out: List[Tuple[str, str]] = []
    seen = set()
    for item in soup.select(source.item_selector):
        title_el = item.select_one(source.item_title_selector)
        link = item.select_one("a[href]")
        title = clean_line(title_el.get_text(" ")) if title_el else ""
        href = link.get("href") if link else ""
        if not title or not href:
            continue
        url = absolute_url(href, source.base_url)
        if not is_absolute_url(url) or url in seen:
            continue
        seen.add(url)
        out.append((title, url))
    return out


def _paragraph_texts(nodes: Iterable) -> List[str]:
    return [p.get_text().strip() for p in nodes]


def extract_paragraphs(soup: BeautifulSoup, selectors: Iterable[str]) -> Tuple[List[str], str]:
    for selector in selectors:
        regions = soup.select(selector)
        if not regions:
            continue
        # Nested regions (an <article> inside an <article>) share <p> nodes; take each once.
        seen = set()
        nodes = []
        for region in regions:
            for p in region.find_all("p"):
                if id(p) not in seen:
                    seen.add(id(p))
                    nodes.append(p)
        paragraphs = [t for t in _paragraph_texts(nodes) if len(t) > REGION_MIN_PARAGRAPH_CHARS]
        if paragraphs:
            return paragraphs, f"selector:{selector}"

    # Some templates keep the region markup but put the body elsewhere.
    fallback = [t for t in _paragraph_texts(soup.find_all("p")) if len(t) > PAGE_MIN_PARAGRAPH_CHARS]
    if fallback:
        return fallback[:PAGE_MAX_PARAGRAPHS], "page_fallback"
    return [], ""


def extract_image(soup: BeautifulSoup, selectors: Iterable[str]) -> Tuple[str, str]:
    for selector in selectors:
        el = soup.select_one(selector)
        if el is None:
            continue
        # Lazy-loaded images often carry a data: placeholder in src.
        for attr in IMAGE_ATTRS:
            value = (el.get(attr) or "").strip()
            if is_absolute_url(value):
                return value, selector
    return "", ""


def extract_article(html: str, source: SourceConfig) -> ArticleParts:
    soup = parse_html(html)
    out = ArticleParts()

    title_el = soup.select_one(source.title_selector)
    if title_el is not None:
        out.title = clean_line(title_el.get_text(" "))

    paragraphs, out.content_source = extract_paragraphs(soup, source.content_selectors)
    out.content = clean_text("\n\n".join(paragraphs))

    out.image_url, out.image_source = extract_image(soup, source.image_selectors)
    return out
