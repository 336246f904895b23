"""Shared Pydantic schema bases."""
from pydantic import BaseModel, model_validator
from typing import ClassVar, Tuple


class UpdateSchema(BaseModel):
    """
    Base for partial-update schemas.

    Fields are optional so they can be left out, but fields listed in
    `required_if_set` back NOT NULL columns and may not be sent as null.
    """
    required_if_set: ClassVar[Tuple[str, ...]] = ()

    @model_validator(mode="after")
    def reject_null_required_fields(self) -> "UpdateSchema":
        nulled = [
            field for field in self.required_if_set
            if field in self.model_fields_set and getattr(self, field) is None
        ]
        if nulled:
            raise ValueError(f"Fields cannot be null: {', '.join(nulled)}")
        return self
