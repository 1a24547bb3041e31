from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List

ARTICLE_ID_SEPARATOR = "_"


def make_article_id(source: str, url: str) -> str:
    return f"{source}{ARTICLE_ID_SEPARATOR}{url}"


@dataclass
class Candidate:
    source: str
    url: str
    title: str = ""
    author: str = ""
    category: str = ""

    @property
    def article_id(self) -> str:
        return make_article_id(self.source, self.url)


@dataclass
class FullArticle:
    title: str
    content: str
    source_url: str
    image_url: str = ""


@dataclass
class PublishedArticle:
    title: str
    content: str
    source_url: str
    article_id: str
    image_url: str = ""
    author: str = ""
    category: str = ""
    tags: List[str] = field(default_factory=list)

    @classmethod
    def from_parts(cls, full: FullArticle, candidate: Candidate, tags: List[str]) -> "PublishedArticle":
        return cls(
            title=full.title,
            content=full.content,
            source_url=full.source_url,
            image_url=full.image_url,
            author=candidate.author,
            category=candidate.category,
            tags=list(tags),
            article_id=candidate.article_id,
        )

    def to_payload(self, default_author: str = "", default_category: str = "") -> Dict[str, Any]:
        return {
            "title": self.title,
            "content": self.content,
            "author": self.author or default_author,
            "category": self.category or default_category,
            "image_url": self.image_url or "",
            "tags": list(self.tags),
            "source_url": self.source_url,
        }
