import sys

from loguru import logger
from pydantic import ValidationError

from burn_watcher.config import AppSettings
from burn_watcher.db import init_db, make_session_factory
from burn_watcher.poller import BurnPoller


def main() -> int:
    try:
        settings = AppSettings()
    except ValidationError as e:
        print(f"invalid configuration: {e}", file=sys.stderr)
        return 1
    logger.remove()
    logger.add(sys.stderr, level=settings.log_level)

    logger.info("RPC: {}", settings.rpc_url)
    logger.info("Watching address: {}", settings.watch_address)

    try:
        SessionFactory = None
        if settings.database_url:
            init_db(settings.database_url)
            SessionFactory = make_session_factory(settings.database_url)
        poller = BurnPoller.create(settings, SessionFactory=SessionFactory)
    except Exception as e:
        logger.error("Startup failed: {}", e)
        return 1

    poller.run_forever()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
