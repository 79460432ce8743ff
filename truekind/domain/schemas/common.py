# truekind/domain/schemas/common.py
from datetime import datetime
from decimal import Decimal
from typing import Annotated, Any, ClassVar

from pydantic import BaseModel, ConfigDict, PlainSerializer, field_validator, model_validator
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

from truekind.domain.states import STAFF_ROLES
from truekind.utils.clock import as_utc

# fields a client may never set, ownership always comes from the session
IDENTITY_FIELDS = ("userId", "user_id", "authorId", "author_id")

Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]

SLUG_PATTERN = r"^[a-z0-9]+(?:-[a-z0-9]+)*$"


class ApiModel(BaseModel):
    """camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class Payload(ApiModel):
    """Base for request bodies."""

    model_config = ConfigDict(str_strip_whitespace=True)

    @model_validator(mode="before")
    @classmethod
    def reject_identity_fields(cls, data: Any):
        if isinstance(data, dict) and any(key in data for key in IDENTITY_FIELDS):
            raise PydanticCustomError("USER_ID_NOT_ALLOWED", "User ID cannot be provided in request body")
        return data

    @field_validator("*", mode="after")
    @classmethod
    def normalize_datetimes(cls, value):
        if isinstance(value, datetime):
            return as_utc(value)
        return value


class UpdatePayload(Payload):
    """Partial update body. Only keys present in the request are applied."""

    required_fields: ClassVar[tuple[str, ...]] = ()

    @model_validator(mode="after")
    def reject_null_required(self):
        for name in self.model_fields_set:
            if name in self.required_fields and getattr(self, name) is None:
                raise PydanticCustomError(
                    "MISSING_REQUIRED_FIELD",
                    "{field} cannot be null",
                    {"field": to_camel(name)},
                )
        return self

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)


class SessionUser(ApiModel):
    id: str
    name: str
    email: str
    image: str | None = None
    role: str = "user"

    @property
    def is_staff(self) -> bool:
        return self.role in STAFF_ROLES
