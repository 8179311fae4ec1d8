"""User-defined class schema."""

from __future__ import annotations

from uuid import uuid4

from pydantic import BaseModel, Field

# An encoded image: raw JPEG/PNG bytes or a ``data:image/...;base64,`` URL.
EncodedSample = bytes | str


class ClassDefinition(BaseModel):
    """A labeled collection of encoded image samples.

    Owned by the caller; names are user-editable and need not be unique.
    Training only reads it.
    """

    id: str = Field(default_factory=lambda: uuid4().hex)
    name: str
    samples: list[EncodedSample] = Field(default_factory=list)
