from beanie import Indexed
from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime
from typing import Annotated, Any, Dict, Optional

# Required, non-empty, backed by a unique index
UniqueStr = Annotated[str, Indexed(unique=True), Field(min_length=1)]


class EmbeddedModel(BaseModel):
    """Base for sub-documents. Enum members are stored as plain strings."""
    model_config = ConfigDict(use_enum_values=True)


class DocumentModel(EmbeddedModel):
    """
    Fields and helpers shared by the top-level documents.

    Mixed in ahead of beanie's Document, which supplies `id` (an ObjectId
    serialized as "_id") and binds the class to its collection.
    """
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None

    def to_response(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")
