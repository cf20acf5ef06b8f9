"""CLI entry point: API, receptor headless e inicialización de BD."""

from __future__ import annotations

import argparse
import logging
import threading

from common.config import get_settings
from common.db import get_engine
from common.logging_config import setup_logging
from common.schema import ensure_schema

logger = logging.getLogger(__name__)


def _serve(args: argparse.Namespace) -> int:
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "automation_api.main:app",
        host=args.host or settings.api_host,
        port=args.port or settings.api_port,
        log_level=settings.log_level.lower(),
    )
    return 0


def _run_receiver(args: argparse.Namespace) -> int:
    from .core.receiver import AutomationReceiver

    settings = get_settings()
    engine = get_engine(settings)
    ensure_schema(engine)

    receiver = AutomationReceiver(settings, engine)
    if not receiver.start():
        logger.error("Receiver failed to start")
        return 1

    stop = threading.Event()
    try:
        while not stop.wait(args.stats_interval):
            logger.info("Receiver stats: %s", receiver.stats)
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down...")
    finally:
        receiver.stop()
        engine.dispose()
    return 0


def _init_db(args: argparse.Namespace) -> int:
    engine = get_engine(get_settings())
    ensure_schema(engine)
    engine.dispose()
    return 0


def main(argv: list[str] | None = None) -> int:
    setup_logging(get_settings().log_level)

    p = argparse.ArgumentParser(description="IoT automation service (MQTT ingest + rules)")
    sub = p.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="run the HTTP API with the MQTT receiver")
    serve.add_argument("--host", default=None)
    serve.add_argument("--port", type=int, default=None)
    serve.set_defaults(func=_serve)

    receiver = sub.add_parser("receiver", help="run only the MQTT pipeline")
    receiver.add_argument("--stats-interval", type=float, default=60.0)
    receiver.set_defaults(func=_run_receiver)

    init_db = sub.add_parser("init-db", help="create the schema and exit")
    init_db.set_defaults(func=_init_db)

    args = p.parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    raise SystemExit(main())
