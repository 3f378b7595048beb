"""Key-value record model and its presence-sensitive partial update."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from core.utils.constants import RECORD_FIELD_UNIT_NUMBER

Record = dict[str, Any]


class RecordUpdate(BaseModel):
    """Partial update for the stored record.

    A field counts as present when the caller sent the key, whatever its
    value. ``{"unitNumber": ""}`` and ``{"unitNumber": null}`` both target
    ``unitNumber``; ``{}`` targets nothing. Presence is read from
    ``model_fields_set``, never from truthiness.
    """

    model_config = ConfigDict(extra="ignore")

    address: Any = Field(None, description="Street address")
    unit_number: Any = Field(None, alias=RECORD_FIELD_UNIT_NUMBER, description="Unit number")

    def present_fields(self) -> Record:
        """Return the fields the caller sent, keyed by their wire names."""
        return self.model_dump(by_alias=True, exclude_unset=True)

    def is_empty(self) -> bool:
        return not self.model_fields_set

    def apply_to(self, record: Record) -> Record:
        """Return a copy of ``record`` with every present field overwritten."""
        merged: Record = dict(record)
        merged.update(self.present_fields())
        return merged
