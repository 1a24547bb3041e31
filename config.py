from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Dict, List, Tuple


class ConfigError(ValueError):
    pass


def _env_bool(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes"}


def _env_list(name: str, default: str) -> List[str]:
    raw = os.getenv(name, default)
    return [item.strip() for item in raw.split(",") if item.strip()]


@dataclass(frozen=True)
class SourceConfig:
    name: str
    listing_url: str
    base_url: str
    author: str
    category: str = "article"
    item_selector: str = "article"
    item_title_selector: str = "h2, h3"
    title_selector: str = "h1"
    content_selectors: Tuple[str, ...] = ()
    image_selectors: Tuple[str, ...] = ()
    max_candidates: int = 10


@dataclass
class Settings:
    post_time_hour: int = 9
    post_time_minute: int = 0
    scrape_sources: List[str] = field(default_factory=lambda: ["hypebeast", "24hiphop"])
    api_url: str = "http://localhost:3000"
    admin_email: str = ""
    admin_password: str = ""
    default_author: str = "Bot808"
    default_category: str = "article"
    user_agent: str = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"
    request_timeout: int = 15
    posted_articles_file: str = "posted-articles.json"
    log_file: str = os.path.join("logs", "bot.log")
    log_level: str = "INFO"
    dry_run: bool = False
    run_on_startup: bool = False
    check_existing_titles: bool = False
    cloudinary_cloud_name: str = ""
    cloudinary_api_key: str = ""
    cloudinary_api_secret: str = ""
    cloudinary_folder: str = "rap-blog"

    @property
    def post_time(self) -> str:
        return f"{self.post_time_hour:02d}:{self.post_time_minute:02d}"

    def validate(self) -> None:
        if not 0 <= self.post_time_hour <= 23:
            raise ConfigError(f"POST_TIME_HOUR must be between 0 and 23, got {self.post_time_hour}")
        if not 0 <= self.post_time_minute <= 59:
            raise ConfigError(f"POST_TIME_MINUTE must be between 0 and 59, got {self.post_time_minute}")
        if not self.scrape_sources:
            raise ConfigError("SCRAPE_SOURCES must name at least one source")
        if self.request_timeout <= 0:
            raise ConfigError(f"REQUEST_TIMEOUT must be positive, got {self.request_timeout}")


def _env_int(name: str, default: str) -> int:
    raw = os.getenv(name, default).strip()
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from exc


def load_settings() -> Settings:
    """Build Settings from the process environment (after load_dotenv)."""
    defaults = Settings()
    return Settings(
        post_time_hour=_env_int("POST_TIME_HOUR", "9"),
        post_time_minute=_env_int("POST_TIME_MINUTE", "0"),
        scrape_sources=_env_list("SCRAPE_SOURCES", "hypebeast,24hiphop"),
        api_url=os.getenv("API_URL", defaults.api_url).rstrip("/"),
        admin_email=os.getenv("ADMIN_EMAIL", ""),
        admin_password=os.getenv("ADMIN_PASSWORD", ""),
        default_author=os.getenv("DEFAULT_AUTHOR", defaults.default_author),
        default_category=os.getenv("DEFAULT_CATEGORY", defaults.default_category),
        user_agent=os.getenv("USER_AGENT", defaults.user_agent),
        request_timeout=_env_int("REQUEST_TIMEOUT", "15"),
        posted_articles_file=os.getenv("POSTED_ARTICLES_FILE", defaults.posted_articles_file),
        log_file=os.getenv("LOG_FILE", defaults.log_file),
        log_level=os.getenv("LOG_LEVEL", defaults.log_level).upper(),
        dry_run=_env_bool("DRY_RUN"),
        run_on_startup=_env_bool("RUN_ON_STARTUP"),
        check_existing_titles=_env_bool("CHECK_EXISTING_TITLES"),
        cloudinary_cloud_name=os.getenv("CLOUDINARY_CLOUD_NAME", ""),
        cloudinary_api_key=os.getenv("CLOUDINARY_API_KEY", ""),
        cloudinary_api_secret=os.getenv("CLOUDINARY_API_SECRET", ""),
        cloudinary_folder=os.getenv("CLOUDINARY_FOLDER", defaults.cloudinary_folder),
    )


HYPEBEAST = SourceConfig(
    name="hypebeast",
    listing_url="https://hypebeast.com/music",
    base_url="https://hypebeast.com",
    author="Hypebeast",
    item_selector=".post-box, article",
    item_title_selector="h2, h3, .post-title, .title",
    title_selector="h1, .article-title, .post-title",
    content_selectors=(
        ".article-content",
        ".post-content",
        ".article-body",
        "article .content",
        ".post-body",
        "article",
    ),
    image_selectors=(
        "article img.featured-image",
        ".article-content img",
        "article img",
        ".post-thumbnail img",
        'meta[property="og:image"]',
    ),
)

HIPHOP24 = SourceConfig(
    name="24hiphop",
    listing_url="https://24hip-hop.com",
    base_url="https://24hip-hop.com",
    author="24Hip-Hop",
    item_selector="article, .post, .entry",
    item_title_selector="h2, h3, .entry-title, .post-title",
    title_selector="h1, .entry-title, .article-title, .post-title",
    content_selectors=(
        ".entry-content",
        ".post-content",
        ".article-content",
        "article .content",
        ".post-body",
        "article",
    ),
    image_selectors=(
        "article img.featured-image",
        ".entry-content img",
        "article img",
        ".post-thumbnail img",
        'meta[property="og:image"]',
    ),
)

ALL_SOURCES: List[SourceConfig] = [HYPEBEAST, HIPHOP24]
SOURCE_CONFIGS: Dict[str, SourceConfig] = {s.name: s for s in ALL_SOURCES}
