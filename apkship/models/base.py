"""Shared Pydantic base for registry records and settings payloads."""

from typing import Any

from pydantic import BaseModel, ConfigDict


class ApkshipBaseModel(BaseModel):
    """Registry records serialize through their aliases in JSON mode.

    Keys stay camelCase on disk so files written by older versions of the
    tool load unchanged.
    """

    model_config = ConfigDict(
        # Unknown keys survive a load/save round trip
        extra="allow",
        str_strip_whitespace=True,
        use_enum_values=True,
        validate_assignment=True,
        populate_by_name=True,
    )

    def to_dict_full(self) -> dict[str, Any]:
        """Dump every field, unset ones included, as written to the registry."""
        return self.model_dump(by_alias=True, exclude_unset=False, mode="json")
