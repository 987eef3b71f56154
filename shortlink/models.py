from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, String

from shortlink.database import Base
from shortlink.validators import MAX_CODE_LENGTH, MAX_URL_LENGTH


def _as_utc(value: datetime | None) -> datetime | None:
    # SQLite hands back naive datetimes; everything is stored in UTC
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class ShortLink(Base):
    __tablename__ = "short_links"

    id = Column(Integer, primary_key=True, index=True)
    code = Column(String(MAX_CODE_LENGTH), unique=True, index=True, nullable=False)
    target_url = Column(String(MAX_URL_LENGTH), nullable=False)
    clicks = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=True)

    @property
    def created(self) -> datetime | None:
        return _as_utc(self.created_at)

    @property
    def expires(self) -> datetime | None:
        return _as_utc(self.expires_at)

    def is_expired(self, now: datetime) -> bool:
        expires = self.expires
        return expires is not None and expires <= now
