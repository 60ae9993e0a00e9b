"""
CLI entrypoint for the expired refresh token sweep. Run from cron, e.g.:

  python -m app.token_cleanup

Or hourly: 0 * * * * cd /path/to/ohmybaby && .venv/bin/python -m app.token_cleanup
"""

import logging
import sys

from app.core.config import get_settings
from app.core.database import SessionLocal
from app.core.logging import configure_logging
from app.core.security import build_password_hasher, build_token_codec
from app.services.auth import AuthService

logger = logging.getLogger(__name__)


def main() -> int:
    """Delete refresh tokens whose stored expiry has passed."""
    settings = get_settings()
    configure_logging(settings.LOG_LEVEL)
    if not settings.TOKEN_CLEANUP_ENABLED:
        logger.info("Token cleanup is disabled (TOKEN_CLEANUP_ENABLED=false); skipping.")
        return 0

    db = SessionLocal()
    try:
        service = AuthService(db, build_token_codec(settings), build_password_hasher(settings))
        deleted = service.cleanup_expired_tokens()
        logger.info("Token cleanup completed: tokens_deleted=%s", deleted)
        return 0
    except Exception as e:
        logger.exception("Token cleanup failed: %s", e)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
