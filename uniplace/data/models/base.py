"""
Shared pieces of the UniPlace documents.

Every stored record (student, posting, application, notification) is a
`BaseDocument`: a pydantic model keyed by a MongoDB ObjectId under `_id`,
with enum fields held as their plain string values and naive-UTC
timestamps, which is how MongoDB returns datetimes.
"""

from datetime import datetime, timezone
from typing import Annotated, Any, Optional

from bson import ObjectId
from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, PlainSerializer


def utc_now() -> datetime:
    """Current UTC time as a naive datetime."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def as_naive_utc(value: datetime) -> datetime:
    """Bring an aware datetime to UTC and drop the offset; naive values pass through."""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def parse_object_id(value: Any) -> ObjectId:
    """
    Accept an ObjectId or its 24-hex string form.

    Raises:
        ValueError: Anything else, including malformed strings
    """
    if isinstance(value, ObjectId):
        return value
    if isinstance(value, str) and ObjectId.is_valid(value):
        return ObjectId(value)
    raise ValueError(f"Invalid ObjectId: {value!r}")


# Stored as a real ObjectId, rendered as a string in JSON output
PyObjectId = Annotated[
    ObjectId,
    BeforeValidator(parse_object_id),
    PlainSerializer(str, return_type=str, when_used="json"),
]


class BaseDocument(BaseModel):
    """A record with its own MongoDB collection."""

    model_config = ConfigDict(
        populate_by_name=True,
        arbitrary_types_allowed=True,
        use_enum_values=True,
        validate_default=True,
    )

    id: Optional[PyObjectId] = Field(default=None, alias="_id")
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    def model_dump_mongo(self) -> dict[str, Any]:
        """Document ready for insertion; `_id` is left out until MongoDB assigns it."""
        return self.model_dump(by_alias=True, exclude_none=True)
