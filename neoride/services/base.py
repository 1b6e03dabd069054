"""
Document Service - shared CRUD flow

Customer and driver services differ only in how a document is built from
a create payload and how it is normalized after an update. Everything
else (connect, look up by externalId, NotFound, replace, delete) lives here.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Generic, Mapping, Optional, Type, TypeVar

from neoride.core.database import ConnectionManager
from neoride.core.errors import NotFoundError
from neoride.models.base import DocumentModel
from neoride.repositories.base import DocumentRepository
from neoride.utils.documents import merge_update, validate_document

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=DocumentModel)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DocumentService(Generic[ModelT]):
    """Service for one entity type (Async)"""

    repository_class: Type[DocumentRepository]
    model: Type[ModelT]

    def __init__(self, connections: ConnectionManager, clock: Optional[Callable[[], datetime]] = None):
        self.connections = connections
        self.clock = clock or utcnow

    @property
    def entity(self) -> str:
        return self.repository_class.entity

    async def repository(self) -> DocumentRepository:
        """Connect (or reuse the cached handle) before touching storage."""
        await self.connections.connect()
        return self.repository_class()

    # ========================================================================
    # Hooks
    # ========================================================================

    def build(self, payload: Mapping[str, Any], now: datetime) -> ModelT:
        raise NotImplementedError

    def normalize(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return data

    # ========================================================================
    # Operations
    # ========================================================================

    async def create(self, payload: Mapping[str, Any]) -> ModelT:
        logger.info(f"Received {self.entity.lower()} creation request for externalId={payload.get('externalId')}")

        # Payload is validated before any connection attempt
        document = self.build(payload, self.clock())

        repository = await self.repository()
        saved = await repository.insert(document)

        logger.info(f"{self.entity} created: id={saved.id} externalId={saved.externalId} email={saved.email}")
        return saved

    async def get(self, external_id: str) -> ModelT:
        repository = await self.repository()
        document = await repository.get_by_external_id(external_id)
        if document is None:
            raise NotFoundError(self.entity, external_id)
        return document

    async def update(self, external_id: str, payload: Mapping[str, Any]) -> ModelT:
        repository = await self.repository()
        existing = await repository.get_by_external_id(external_id)
        if existing is None:
            raise NotFoundError(self.entity, external_id)

        merged = self.normalize(merge_update(existing, payload, self.clock()))
        document = validate_document(self.model, merged)

        updated = await repository.replace(document)
        if updated is None:
            raise NotFoundError(self.entity, external_id)

        logger.info(f"{self.entity} {external_id} updated")
        return updated

    async def delete(self, external_id: str) -> None:
        repository = await self.repository()
        deleted = await repository.delete_by_external_id(external_id)
        if not deleted:
            raise NotFoundError(self.entity, external_id)
        logger.info(f"{self.entity} {external_id} deleted")
