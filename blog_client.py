from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests

from config import Settings
from logs import log_event
from models import PublishedArticle

logger = logging.getLogger(__name__)

CREATED = 201


def truncate_line(line: str, max_len: int) -> str:
    if len(line) <= max_len:
        return line
    return line[: max_len - 1].rstrip() + "…"


def blog_login(session: requests.Session, api_url: str, email: str, password: str, timeout: int) -> str:
    r = session.post(
        f"{api_url}/api/auth/login",
        json={"email": email, "password": password},
        timeout=timeout,
    )
    r.raise_for_status()
    return r.json().get("token") or ""


def create_article(session: requests.Session, api_url: str, token: str, payload: Dict[str, Any], timeout: int) -> requests.Response:
    return session.post(
        f"{api_url}/api/articles",
        headers={"Authorization": f"Bearer {token}", "Content-Type": "application/json"},
        json=payload,
        timeout=timeout,
    )


class BlogPublisher:
    def __init__(self, settings: Settings, session: requests.Session):
        self.settings = settings
        self.session = session

    def authenticate(self) -> Optional[str]:
        try:
            token = blog_login(
                self.session,
                self.settings.api_url,
                self.settings.admin_email,
                self.settings.admin_password,
                self.settings.request_timeout,
            )
        except (requests.RequestException, ValueError, AttributeError) as exc:
            log_event(logger, logging.ERROR, "login_failed", api=self.settings.api_url, error=repr(exc))
            return None
        if not token:
            log_event(logger, logging.ERROR, "login_failed", api=self.settings.api_url, error="no_token_in_response")
            return None
        log_event(logger, logging.INFO, "login_ok", api=self.settings.api_url)
        return token

    def build_payload(self, article: PublishedArticle) -> Dict[str, Any]:
        return article.to_payload(self.settings.default_author, self.settings.default_category)

    def publish(self, article: PublishedArticle, token: str) -> bool:
        payload = self.build_payload(article)
        log_event(
            logger,
            logging.INFO,
            "publish_attempt",
            title=truncate_line(payload["title"], 120),
            image_url=payload["image_url"] or "(none)",
            content_chars=len(payload["content"]),
            tags=",".join(payload["tags"]) or "(none)",
        )
        try:
            r = create_article(self.session, self.settings.api_url, token, payload, self.settings.request_timeout)
        except requests.RequestException as exc:
            log_event(logger, logging.ERROR, "publish_failed", title=payload["title"], error=repr(exc))
            return False
        if r.status_code != CREATED:
            log_event(
                logger,
                logging.ERROR,
                "publish_rejected",
                title=payload["title"],
                status=r.status_code,
                body=truncate_line(r.text or "", 500),
            )
            return False
        log_event(logger, logging.INFO, "publish_ok", title=payload["title"], with_image="yes" if payload["image_url"] else "no")
        return True

    def article_exists(self, title: str) -> bool:
        """Case-insensitive title match against the blog's article list."""
        try:
            r = self.session.get(f"{self.settings.api_url}/api/articles", timeout=self.settings.request_timeout)
            r.raise_for_status()
            articles = r.json().get("articles") or []
        except (requests.RequestException, ValueError, AttributeError) as exc:
            log_event(logger, logging.WARNING, "existing_titles_check_failed", error=repr(exc))
            return False
        wanted = title.strip().lower()
        return any(
            isinstance(a, dict) and str(a.get("title", "")).strip().lower() == wanted
            for a in articles
        )
