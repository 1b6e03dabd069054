"""
Helpers shared by the customer and driver services:
required-field checks, pydantic error mapping, the update merge.
"""
import logging
from datetime import datetime
from typing import Any, Dict, List, Mapping, Type, TypeVar

from pydantic import ValidationError

from neoride.core.errors import DocumentValidationError, MissingFieldsError
from neoride.models.base import DocumentModel

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=DocumentModel)

# Never taken from a request body
SERVER_MANAGED_FIELDS = frozenset({"_id", "id", "createdAt", "updatedAt"})


def is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def require_fields(payload: Mapping[str, Any], required: List[str]) -> None:
    """Raise MissingFieldsError naming every required key that is absent or blank."""
    missing = [field for field in required if is_blank(payload.get(field))]
    if missing:
        logger.warning(f"Rejected request, missing required fields: {missing}")
        raise MissingFieldsError(
            required=list(required),
            missing=missing,
            received=list(payload.keys()),
        )


def caller_fields(payload: Mapping[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in payload.items() if key not in SERVER_MANAGED_FIELDS}


def lower_if_str(value: Any) -> Any:
    return value.lower() if isinstance(value, str) else value


def upper_if_str(value: Any) -> Any:
    return value.upper() if isinstance(value, str) else value


def validation_details(exc: ValidationError) -> Dict[str, str]:
    """Map pydantic errors to {"dotted.field.path": "message"}."""
    details: Dict[str, str] = {}
    for error in exc.errors():
        field = ".".join(str(part) for part in error["loc"]) or "document"
        details.setdefault(field, error["msg"])
    return details


def validate_document(model: Type[ModelT], data: Dict[str, Any]) -> ModelT:
    try:
        return model.model_validate(data)
    except ValidationError as e:
        details = validation_details(e)
        logger.warning(f"{model.__name__} failed validation: {details}")
        raise DocumentValidationError(details) from e


def merge_update(existing: DocumentModel, payload: Mapping[str, Any], now: datetime) -> Dict[str, Any]:
    """
    Overlay caller fields on the stored document.
    Top-level merge only: a nested object in the payload replaces the stored one.
    """
    merged = existing.model_dump(by_alias=True, exclude={"id"})
    merged.update(caller_fields(payload))
    merged["_id"] = existing.id
    merged["createdAt"] = existing.createdAt
    merged["updatedAt"] = now
    return merged
