import logging

import psycopg2

from app.config import Settings
from app.errors import PersistenceError

logger = logging.getLogger(__name__)


def get_conn(settings: Settings):
    try:
        conn = psycopg2.connect(
            host=settings.db_host,
            database=settings.db_name,
            user=settings.db_user,
            password=settings.db_pass,
        )
        return conn
    except psycopg2.Error as e:
        logger.error("DB 연결 실패: %s", e)
        raise PersistenceError(f"database connection failed: {e}") from e
