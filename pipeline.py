from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

import requests
from requests.adapters import HTTPAdapter

from blog_client import BlogPublisher
from config import Settings
from filters import extract_tags
from image_host import ImageHost
from logs import log_event
from models import Candidate, PublishedArticle
from sources import SourceAdapter, build_sources
from state import Ledger

logger = logging.getLogger(__name__)


class Stage(str, Enum):
    IDLE = "idle"
    AUTHENTICATING = "authenticating"
    DISCOVERING = "discovering"
    FETCHING_FULL = "fetching_full"
    TAGGING = "tagging"
    PUBLISHING = "publishing"
    RECORDING = "recording"
    ABORTED = "aborted"


@dataclass
class BotContext:
    settings: Settings
    sources: List[SourceAdapter]
    ledger: Ledger
    publisher: BlogPublisher
    image_host: ImageHost


@dataclass
class RunResult:
    stage: Stage = Stage.IDLE
    reason: str = ""
    article_id: str = ""
    article: Optional[PublishedArticle] = None
    published: bool = False
    recorded: bool = False
    stages: List[Stage] = field(default_factory=list)

    def enter(self, stage: Stage) -> None:
        self.stage = stage
        self.stages.append(stage)
        log_event(logger, logging.DEBUG, "stage", stage=stage.value)

    def abort(self, reason: str) -> "RunResult":
        self.enter(Stage.ABORTED)
        self.reason = reason
        return self

    def finish(self, reason: str) -> "RunResult":
        self.enter(Stage.IDLE)
        self.reason = reason
        return self


def create_session(settings: Settings) -> requests.Session:
    session = requests.Session()
    session.headers.update({"User-Agent": settings.user_agent})
    session.mount("http://", HTTPAdapter(pool_connections=4, pool_maxsize=4))
    session.mount("https://", HTTPAdapter(pool_connections=4, pool_maxsize=4))
    return session


def build_context(settings: Settings, session: Optional[requests.Session] = None) -> BotContext:
    session = session or create_session(settings)
    ledger = Ledger.load(settings.posted_articles_file)
    log_event(logger, logging.INFO, "ledger_loaded", path=settings.posted_articles_file, entries=len(ledger))
    return BotContext(
        settings=settings,
        sources=build_sources(settings, session),
        ledger=ledger,
        publisher=BlogPublisher(settings, session),
        image_host=ImageHost(settings, session),
    )


def select_candidate(sources: List[SourceAdapter], ledger: Ledger) -> Optional[Tuple[SourceAdapter, Candidate]]:
    """First unposted candidate, scanning sources in order and stopping at the first hit."""
    for source in sources:
        candidates = source.list_candidates()
        if not candidates:
            log_event(logger, logging.INFO, "source_empty", source=source.name)
            continue
        for candidate in candidates:
            if not ledger.contains(candidate.article_id):
                return source, candidate
        log_event(logger, logging.INFO, "source_exhausted", source=source.name, candidates=len(candidates))
    return None


def run_pipeline(ctx: BotContext) -> RunResult:
    result = RunResult()
    settings = ctx.settings
    log_event(logger, logging.INFO, "run_start", sources=",".join(s.name for s in ctx.sources), dry_run=settings.dry_run)

    token = ""
    if not settings.dry_run:
        result.enter(Stage.AUTHENTICATING)
        token = ctx.publisher.authenticate()
        if not token:
            log_event(logger, logging.ERROR, "run_aborted", reason="auth_failed")
            return result.abort("auth_failed")

    result.enter(Stage.DISCOVERING)
    picked = select_candidate(ctx.sources, ctx.ledger)
    if picked is None:
        log_event(logger, logging.INFO, "no_new_articles")
        return result.abort("no_new_articles")
    source, candidate = picked
    result.article_id = candidate.article_id
    log_event(logger, logging.INFO, "selected", source=source.name, title=candidate.title, url=candidate.url)

    result.enter(Stage.FETCHING_FULL)
    full = source.fetch_full(candidate.url)
    if full is None or not full.content:
        log_event(logger, logging.ERROR, "run_aborted", reason="fetch_failed", url=candidate.url)
        return result.abort("fetch_failed")
    full.image_url = ctx.image_host.rehost(full.image_url)

    result.enter(Stage.TAGGING)
    article = PublishedArticle.from_parts(full, candidate, extract_tags(full.title))
    result.article = article

    if settings.dry_run:
        log_event(logger, logging.INFO, "dry_run_would_post", title=article.title, tags=",".join(article.tags), url=article.source_url)
        return result.finish("dry_run")

    result.enter(Stage.PUBLISHING)
    if settings.check_existing_titles and ctx.publisher.article_exists(article.title):
        log_event(logger, logging.WARNING, "already_on_blog", title=article.title)
        return result.abort("already_on_blog")
    if not ctx.publisher.publish(article, token):
        log_event(logger, logging.ERROR, "run_aborted", reason="publish_failed", article_id=article.article_id)
        return result.abort("publish_failed")
    result.published = True

    result.enter(Stage.RECORDING)
    result.recorded = ctx.ledger.record(article.article_id)
    log_event(logger, logging.INFO, "posted", article_id=article.article_id, recorded=result.recorded)
    return result.finish("published")


_run_lock = threading.Lock()


def run_cycle(ctx: BotContext) -> Optional[RunResult]:
    """Scheduler entry point: never raises, never overlaps."""
    if not _run_lock.acquire(blocking=False):
        log_event(logger, logging.WARNING, "run_skipped", reason="previous_run_in_progress")
        return None
    try:
        return run_pipeline(ctx)
    except Exception as exc:  # noqa: BLE001
        logger.exception("run_failed error=%r", exc)
        return None
    finally:
        _run_lock.release()
