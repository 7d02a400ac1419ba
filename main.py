"""
Entry point to run one alert pass (for cron / scheduled jobs).
"""
from worker.main import main as worker_main


if __name__ == "__main__":
    raise SystemExit(worker_main())
