"""
Object models shared by stores and services.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class ObjectRef(BaseModel):
    """A pinned version of a named object.

    The generation identifies one immutable version of the bytes behind
    ``name``; reads and composes against a ref never see later writes.
    """

    model_config = {"frozen": True}

    name: str
    generation: int = Field(ge=0)

    def __str__(self) -> str:
        return f"{self.name}#{self.generation}"


class ObjectMetadata(BaseModel):
    """Result of a stat call."""

    model_config = {"frozen": True}

    name: str
    generation: int = Field(ge=0)
    size: int = Field(ge=0)

    @property
    def ref(self) -> ObjectRef:
        """Ref pinned to this generation."""
        return ObjectRef(name=self.name, generation=self.generation)


__all__ = ["ObjectRef", "ObjectMetadata"]
