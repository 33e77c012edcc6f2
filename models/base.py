from datetime import datetime, timezone
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def utcnow() -> datetime:
    """Timezone-aware UTC timestamp used for column defaults"""
    return datetime.now(timezone.utc)
