from __future__ import annotations

import argparse
import logging
import signal
import sys
import time
from typing import List, Optional

import schedule
from dotenv import load_dotenv

from config import ConfigError, load_settings
from logs import configure_logging, log_event
from pipeline import BotContext, build_context, run_cycle

logger = logging.getLogger("music_news_bot")

POLL_SECONDS = 30


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="music-news-bot")
    parser.add_argument("--once", action="store_true", help="Run a single cycle and exit")
    parser.add_argument("--dry-run", action="store_true", help="Scrape and tag but do not publish")
    return parser


def _raise_keyboard_interrupt(signum, frame) -> None:
    raise KeyboardInterrupt


def schedule_daily(ctx: BotContext, scheduler: schedule.Scheduler) -> schedule.Job:
    return scheduler.every().day.at(ctx.settings.post_time).do(run_cycle, ctx)


def run_scheduled(ctx: BotContext, scheduler: Optional[schedule.Scheduler] = None, poll_seconds: int = POLL_SECONDS) -> int:
    scheduler = scheduler or schedule.Scheduler()
    job = schedule_daily(ctx, scheduler)
    log_event(logger, logging.INFO, "scheduled", post_time=ctx.settings.post_time, next_run=job.next_run)
    try:
        if ctx.settings.run_on_startup:
            run_cycle(ctx)
        while True:
            scheduler.run_pending()
            time.sleep(poll_seconds)
    except KeyboardInterrupt:
        log_event(logger, logging.INFO, "shutdown", reason="interrupt")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    load_dotenv()
    args = build_parser().parse_args(argv)
    try:
        settings = load_settings()
        if args.dry_run:
            settings.dry_run = True
        settings.validate()
    except ConfigError as exc:
        configure_logging("music_news_bot")
        log_event(logger, logging.ERROR, "config_error", error=str(exc))
        return 1

    configure_logging("music_news_bot", settings.log_level, settings.log_file)
    ctx = build_context(settings)

    if args.once:
        try:
            result = run_cycle(ctx)
        except KeyboardInterrupt:
            log_event(logger, logging.INFO, "shutdown", reason="interrupt")
            return 0
        log_event(logger, logging.INFO, "run_done", outcome=result.reason if result else "error")
        return 0

    signal.signal(signal.SIGTERM, _raise_keyboard_interrupt)
    return run_scheduled(ctx)


if __name__ == "__main__":
    sys.exit(main())
