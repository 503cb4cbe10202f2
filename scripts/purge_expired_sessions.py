# scripts/purge_expired_sessions.py
# Run periodically (cron, systemd timer); safe to run repeatedly.
import logging

from stepauth.auth import sessions
from stepauth.database.database import SessionLocal

logger = logging.getLogger("purge_expired_sessions")


def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    db = SessionLocal()
    try:
        removed = sessions.delete_expired(db)
    finally:
        db.close()
    logger.info("Removed %d expired sessions", removed)


if __name__ == "__main__":
    main()
