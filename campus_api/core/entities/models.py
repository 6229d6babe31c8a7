from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel


class Entity(BaseModel):
    # Wire names are camelCase; Python attributes stay snake_case.
    # Numbers sent for string fields are taken as their text.
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, coerce_numbers_to_str=True)

    @field_validator("*")
    @classmethod
    def _local_datetime(cls, value):
        # Timestamps are local date-times; an offset in the input is dropped.
        if isinstance(value, datetime) and value.tzinfo is not None:
            return value.replace(tzinfo=None)
        return value

    def to_json(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class MenuItemReview(Entity):
    id: Optional[int] = None
    item_id: int
    reviewer_email: str
    stars: int
    date_reviewed: datetime
    comments: str


class HelpRequest(Entity):
    id: Optional[int] = None
    requester_email: str
    team_id: str
    table_or_breakout_room: str
    request_time: datetime
    explanation: str
    solved: bool


class UCSBOrganization(Entity):
    org_code: str
    org_translation_short: str
    org_translation: str
    inactive: bool
