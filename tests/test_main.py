import schedule

import main
from config import Settings


class FakeCtx:
    def __init__(self, settings):
        self.settings = settings


def test_schedule_daily_uses_configured_time():
    scheduler = schedule.Scheduler()
    job = main.schedule_daily(FakeCtx(Settings(post_time_hour=7, post_time_minute=5)), scheduler)
    assert job.unit == "days"
    assert job.next_run.hour == 7
    assert job.next_run.minute == 5


def test_run_scheduled_exits_cleanly_on_interrupt(monkeypatch):
    calls = []

    def fake_sleep(seconds):
        raise KeyboardInterrupt

    monkeypatch.setattr(main.time, "sleep", fake_sleep)
    monkeypatch.setattr(main, "run_cycle", lambda ctx: calls.append(ctx))
    ctx = FakeCtx(Settings(run_on_startup=True))
    assert main.run_scheduled(ctx, schedule.Scheduler(), poll_seconds=0) == 0
    assert calls == [ctx]


def test_main_rejects_bad_config(monkeypatch):
    monkeypatch.setattr(main, "load_dotenv", lambda: None)
    monkeypatch.setattr(main, "configure_logging", lambda *a, **k: None)
    monkeypatch.setenv("POST_TIME_HOUR", "25")
    assert main.main([]) == 1


def test_main_once_runs_a_single_cycle(monkeypatch, tmp_path):
    monkeypatch.setattr(main, "load_dotenv", lambda: None)
    monkeypatch.setenv("POST_TIME_HOUR", "9")
    monkeypatch.setenv("LOG_FILE", "")
    monkeypatch.setenv("POSTED_ARTICLES_FILE", str(tmp_path / "posted.json"))
    seen = {}

    monkeypatch.setattr(main, "configure_logging", lambda *a, **k: None)
    monkeypatch.setattr(main, "build_context", lambda settings: FakeCtx(settings))

    def fake_run_cycle(ctx):
        seen["settings"] = ctx.settings
        return None

    monkeypatch.setattr(main, "run_cycle", fake_run_cycle)

    assert main.main(["--once", "--dry-run"]) == 0
    assert seen["settings"].dry_run is True


def test_interrupt_during_startup_run_exits_cleanly(monkeypatch):
    def interrupted_run(ctx):
        raise KeyboardInterrupt

    monkeypatch.setattr(main, "run_cycle", interrupted_run)
    monkeypatch.setattr(main.time, "sleep", lambda seconds: None)
    assert main.run_scheduled(FakeCtx(Settings(run_on_startup=True)), schedule.Scheduler(), poll_seconds=0) == 0


def test_interrupt_during_single_cycle_exits_cleanly(monkeypatch, tmp_path):
    monkeypatch.setattr(main, "load_dotenv", lambda: None)
    monkeypatch.setenv("LOG_FILE", "")
    monkeypatch.setenv("POSTED_ARTICLES_FILE", str(tmp_path / "posted.json"))
    monkeypatch.setattr(main, "configure_logging", lambda *a, **k: None)
    monkeypatch.setattr(main, "build_context", lambda settings: FakeCtx(settings))

    def interrupted_run(ctx):
        raise KeyboardInterrupt

    monkeypatch.setattr(main, "run_cycle", interrupted_run)
    assert main.main(["--once", "--dry-run"]) == 0
