"""
Base entity model shared by every stored family.

Entities are stored as JSON documents with camelCase keys; the Python side
works with snake_case attributes. The alias generator bridges the two.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class Entity(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str

    def to_document(self) -> dict:
        """Serialize to the on-disk / API shape (camelCase, no null fields)."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
