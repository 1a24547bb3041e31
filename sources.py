from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Dict, List, Optional

import requests

from config import SOURCE_CONFIGS, Settings, SourceConfig
from logs import log_event
from models import Candidate, FullArticle
from parser_article import extract_article, extract_listing

logger = logging.getLogger(__name__)

ATTRIBUTION_TEMPLATE = "\n\n---\nSource: {url}"


def with_attribution(content: str, url: str) -> str:
    return content + ATTRIBUTION_TEMPLATE.format(url=url)


def _fetch_text(session: requests.Session, url: str, timeout: int) -> str:
    try:
        r = session.get(url, timeout=timeout)
        if r.status_code >= 400:
            log_event(logger, logging.WARNING, "fetch_http_error", url=url, status=r.status_code)
            return ""
        return r.text
    except requests.RequestException as exc:
        log_event(logger, logging.WARNING, "fetch_failed", url=url, error=repr(exc))
        return ""


class SourceAdapter(ABC):
    """A site that can list recent articles and fetch one of them in full."""

    name: str = ""

    @abstractmethod
    def list_candidates(self) -> List[Candidate]:
        ...

    @abstractmethod
    def fetch_full(self, url: str) -> Optional[FullArticle]:
        ...


class HtmlSource(SourceAdapter):
    def __init__(self, config: SourceConfig, session: requests.Session, timeout: int):
        self.config = config
        self.name = config.name
        self.session = session
        self.timeout = timeout

    def list_candidates(self) -> List[Candidate]:
        log_event(logger, logging.INFO, "listing_fetch", source=self.name, url=self.config.listing_url)
        html = _fetch_text(self.session, self.config.listing_url, self.timeout)
        if not html:
            return []
        try:
            entries = extract_listing(html, self.config)
        except Exception as exc:  # noqa: BLE001
            log_event(logger, logging.ERROR, "listing_parse_failed", source=self.name, error=repr(exc))
            return []
        log_event(logger, logging.INFO, "listing_found", source=self.name, count=len(entries))
        return [
            Candidate(
                source=self.name,
                url=url,
                title=title,
                author=self.config.author,
                category=self.config.category,
            )
            for title, url in entries[: self.config.max_candidates]
        ]

    def fetch_full(self, url: str) -> Optional[FullArticle]:
        log_event(logger, logging.INFO, "article_fetch", source=self.name, url=url)
        html = _fetch_text(self.session, url, self.timeout)
        if not html:
            return None
        try:
            parts = extract_article(html, self.config)
        except Exception as exc:  # noqa: BLE001
            log_event(logger, logging.ERROR, "article_parse_failed", source=self.name, url=url, error=repr(exc))
            return None
        if not parts.title or not parts.content:
            log_event(
                logger,
                logging.WARNING,
                "article_incomplete",
                source=self.name,
                url=url,
                has_title=bool(parts.title),
                has_content=bool(parts.content),
            )
            return None
        content = with_attribution(parts.content, url)
        log_event(
            logger,
            logging.INFO,
            "article_extracted",
            source=self.name,
            chars=len(content),
            content_from=parts.content_source,
            image_from=parts.image_source or "none",
        )
        return FullArticle(title=parts.title, content=content, source_url=url, image_url=parts.image_url)


SOURCE_REGISTRY: Dict[str, SourceConfig] = dict(SOURCE_CONFIGS)


def build_sources(settings: Settings, session: requests.Session) -> List[SourceAdapter]:
    out: List[SourceAdapter] = []
    for name in settings.scrape_sources:
        config = SOURCE_REGISTRY.get(name)
        if config is None:
            log_event(logger, logging.WARNING, "unknown_source", source=name, known=",".join(sorted(SOURCE_REGISTRY)))
            continue
        out.append(HtmlSource(config, session, settings.request_timeout))
    return out
