"""Shared base for records loaded from stored documents."""

from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator


class DocumentModel(BaseModel):
    """Base model for document-shaped records.

    Stored documents use camelCase keys and frequently carry explicit
    nulls for fields that were never filled in. Null values (including
    null list items) are dropped before validation so every field falls
    back to its default.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        cleaned = {}
        for key, value in data.items():
            if value is None:
                continue
            if isinstance(value, list):
                value = [item for item in value if item is not None]
            cleaned[key] = value
        return cleaned

    def to_document(self) -> dict:
        """Dump using the stored (camelCase) field names."""
        return self.model_dump(by_alias=True, mode="json")
