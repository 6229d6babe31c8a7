from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Type

from campus_api.core.entities.models import (
    Entity,
    HelpRequest,
    MenuItemReview,
    UCSBOrganization,
)
from campus_api.core.errors import ValidationFailure


@dataclass(frozen=True)
class EntityType:
    """
    Describes one CRUD collection.

    name        display name used in messages ("UCSBOrganization with id ...")
    model       pydantic model class
    key_field   primary-key attribute on the model
    key_type    scalar type of the key (int or str)
    surrogate   True when the store assigns the key on create
    prefix      route collection under /api
    """

    name: str
    model: Type[Entity]
    key_field: str
    key_type: type
    surrogate: bool
    prefix: str
    tag: str

    @property
    def key_param(self) -> str:
        """Wire name of the key (query parameter and JSON field)."""
        field = self.model.model_fields[self.key_field]
        return field.alias or self.key_field

    @property
    def field_names(self) -> List[str]:
        return list(self.model.model_fields.keys())

    def key_of(self, entity: Entity) -> Any:
        return getattr(entity, self.key_field)

    def with_key(self, entity: Entity, key: Any) -> Entity:
        return entity.model_copy(update={self.key_field: key})

    def parse_key(self, raw: Any) -> Any:
        if raw is None or (isinstance(raw, str) and raw.strip() == ""):
            raise ValidationFailure(
                f"Required parameter '{self.key_param}' is not present",
                fields=[self.key_param],
            )
        if self.key_type is int:
            try:
                return int(raw)
            except (TypeError, ValueError):
                raise ValidationFailure(
                    f"Parameter '{self.key_param}' must be an integer, got {raw!r}",
                    fields=[self.key_param],
                )
        return str(raw)


MENU_ITEM_REVIEW = EntityType(
    name="MenuItemReview",
    model=MenuItemReview,
    key_field="id",
    key_type=int,
    surrogate=True,
    prefix="/menuitemreview",
    tag="MenuItemReviews",
)

HELP_REQUEST = EntityType(
    name="HelpRequest",
    model=HelpRequest,
    key_field="id",
    key_type=int,
    surrogate=True,
    prefix="/helprequests",
    tag="HelpRequests",
)

UCSB_ORGANIZATION = EntityType(
    name="UCSBOrganization",
    model=UCSBOrganization,
    key_field="org_code",
    key_type=str,
    surrogate=False,
    prefix="/UCSBOrganization",
    tag="UCSBOrganization",
)

ENTITY_TYPES: List[EntityType] = [MENU_ITEM_REVIEW, HELP_REQUEST, UCSB_ORGANIZATION]
