"""
CLI entrypoint for the refresh token expiry sweep. Run from cron, e.g.:

  python -m roster.sweep

Or hourly: 0 * * * * cd /path/to/roster && .venv/bin/python -m roster.sweep
"""

import logging
import sys

from roster.core.config import get_settings
from roster.core.database import create_db_engine, create_session_factory
from roster.services.refresh_registry import RefreshTokenRegistry

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


def main() -> int:
    """Delete refresh token rows whose expiry has passed."""
    settings = get_settings()
    session_factory = create_session_factory(create_db_engine(settings))
    db = session_factory()
    try:
        deleted = RefreshTokenRegistry(db).purge_expired()
        logger.info("Sweep completed: refresh_tokens_deleted=%s", deleted)
        return 0
    except Exception as e:
        logger.exception("Sweep job failed: %s", e)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
