from .models import Entity, HelpRequest, MenuItemReview, UCSBOrganization
from .registry import (
    ENTITY_TYPES,
    HELP_REQUEST,
    MENU_ITEM_REVIEW,
    UCSB_ORGANIZATION,
    EntityType,
)

__all__ = [
    "Entity",
    "EntityType",
    "ENTITY_TYPES",
    "HELP_REQUEST",
    "HelpRequest",
    "MENU_ITEM_REVIEW",
    "MenuItemReview",
    "UCSB_ORGANIZATION",
    "UCSBOrganization",
]
