from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Any, Dict

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field

OBJECT_ID_PATTERN = r"^[0-9a-fA-F]{24}$"

ObjectIdStr = Annotated[str, Field(pattern=OBJECT_ID_PATTERN, description="24-character hex ObjectId")]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC so they compare against `utc_now()`."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


class DocumentResponse(BaseModel):
    """Base for response models built from raw Mongo documents."""

    model_config = ConfigDict(extra="ignore")

    id: str = Field(..., description="Document id")

    @classmethod
    def from_document(cls, doc: Dict[str, Any]):
        data = {}
        for key, value in doc.items():
            if key == "_id":
                key = "id"
            data[key] = str(value) if isinstance(value, ObjectId) else value
        return cls(**data)


class PaginationMeta(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int
