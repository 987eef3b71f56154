from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class ShortenRequest(BaseModel):
    url: str
    custom: str | None = None
    ttl_seconds: int | None = None


class ShortenResponse(BaseModel):
    code: str
    short_url: str
    url: str


class LinkInfo(BaseModel):
    code: str
    url: str = Field(validation_alias="target_url")
    clicks: int
    created_at: datetime = Field(validation_alias="created")
    # Stored as expires_at; exposed under the historical key name
    expired_at: datetime | None = Field(default=None, validation_alias="expires")

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class LinkListItem(LinkInfo):
    expired: bool


class PaginatedLinks(BaseModel):
    items: list[LinkListItem]
    total: int
    skip: int
    limit: int


class QROut(BaseModel):
    qr_base64: str


class MessageOut(BaseModel):
    ok: bool
