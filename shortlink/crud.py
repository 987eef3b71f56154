import json
import logging
from datetime import datetime, timedelta, timezone
from typing import Iterator

from sqlalchemy import delete, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from shortlink import codegen, models, schemas, validators
from shortlink.errors import CodeConflictError, CodeGenerationError, InvalidInputError

logger = logging.getLogger("shortlink")

MAX_GENERATION_ATTEMPTS = 5


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def get_link(db: Session, code: str) -> models.ShortLink | None:
    return db.query(models.ShortLink).filter_by(code=code).first()


def code_taken(db: Session, code: str) -> bool:
    return code in validators.RESERVED_CODES or get_link(db, code) is not None


def generate_unique_code(db: Session) -> str:
    for attempt in range(1, MAX_GENERATION_ATTEMPTS + 1):
        code = codegen.generate_code()
        if not code_taken(db, code):
            return code
        logger.warning("Generated code %s collided (attempt %d/%d)", code, attempt, MAX_GENERATION_ATTEMPTS)
    logger.error("Code generation exhausted after %d attempts", MAX_GENERATION_ATTEMPTS)
    raise CodeGenerationError("could not generate a unique code, try again later")


def _check_custom_code(db: Session, custom: str) -> str:
    if len(custom) > validators.MAX_CODE_LENGTH:
        raise InvalidInputError(f"custom code must be at most {validators.MAX_CODE_LENGTH} characters")
    if not validators.is_valid_code(custom):
        raise InvalidInputError("custom code may only contain letters, digits, '-' and '_'")
    if custom in validators.RESERVED_CODES:
        raise InvalidInputError(f"custom code '{custom}' is reserved")
    if get_link(db, custom) is not None:
        raise CodeConflictError(f"code '{custom}' already exists")
    return custom


def insert_link(db: Session, link: models.ShortLink) -> models.ShortLink:
    db.add(link)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise CodeConflictError(f"code '{link.code}' already exists")
    db.refresh(link)
    return link


def create_link(db: Session, link_in: schemas.ShortenRequest) -> models.ShortLink:
    url = (link_in.url or "").strip()
    if not url:
        raise InvalidInputError("url must not be empty")
    if not validators.is_valid_url(url):
        raise InvalidInputError("url is not a valid http(s) URL")
    url = validators.normalize_url(url)
    if len(url) > validators.MAX_URL_LENGTH:
        raise InvalidInputError(f"url must be at most {validators.MAX_URL_LENGTH} characters")
    if link_in.ttl_seconds is not None and link_in.ttl_seconds < 0:
        raise InvalidInputError("ttl_seconds must not be negative")

    if link_in.custom is not None:
        code = _check_custom_code(db, link_in.custom)
    else:
        code = generate_unique_code(db)

    now = utcnow()
    expires_at = None
    if link_in.ttl_seconds:
        try:
            expires_at = now + timedelta(seconds=link_in.ttl_seconds)
        except (OverflowError, ValueError):
            raise InvalidInputError("ttl_seconds is too large")

    link = models.ShortLink(
        code=code,
        target_url=url,
        clicks=0,
        created_at=now,
        expires_at=expires_at,
    )
    return insert_link(db, link)


def increment_clicks(db: Session, code: str) -> None:
    db.execute(
        update(models.ShortLink)
        .where(models.ShortLink.code == code)
        .values(clicks=models.ShortLink.clicks + 1)
    )
    db.commit()


def delete_link(db: Session, code: str) -> int:
    result = db.execute(delete(models.ShortLink).where(models.ShortLink.code == code))
    db.commit()
    return result.rowcount


def get_links(db: Session, skip: int = 0, limit: int = 100) -> list[models.ShortLink]:
    return (
        db.query(models.ShortLink)
        .order_by(models.ShortLink.created_at.desc(), models.ShortLink.id.desc())
        .offset(skip)
        .limit(limit)
        .all()
    )


def count_links(db: Session) -> int:
    return db.query(models.ShortLink).count()


def iter_all_links(db: Session) -> Iterator[models.ShortLink]:
    yield from db.query(models.ShortLink).order_by(models.ShortLink.id).yield_per(500)


def export_links(db: Session, path: str) -> int:
    """Dump every stored link (expired ones included) to ``path`` as JSON."""
    items = [
        schemas.LinkInfo.model_validate(link).model_dump(mode="json", by_alias=True)
        for link in iter_all_links(db)
    ]
    with open(path, "w", encoding="utf-8") as fh:
        json.dump(items, fh, indent=2)
    logger.info("Exported %d links to %s", len(items), path)
    return len(items)
