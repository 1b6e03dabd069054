import logging
import re
from typing import Any, Dict, Generic, Optional, Tuple, Type, TypeVar

from beanie import PydanticObjectId
from beanie.exceptions import DocumentNotFound
from pymongo.errors import DuplicateKeyError as MongoDuplicateKeyError, PyMongoError

from neoride.core.errors import DuplicateKeyError, StorageError
from neoride.models.base import DocumentModel

# Logger setup
logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=DocumentModel)

_INDEX_NAME_PATTERN = re.compile(r"index: ([\w.]+?)_-?1\b")


class DocumentRepository(Generic[ModelT]):
    """
    Repository for one beanie document class, keyed by externalId.

    Every driver error is classified here: unique index violations become
    DuplicateKeyError naming the field, anything else a StorageError.
    The document class must be bound (init_documents) before use.
    """

    entity: str
    model: Type[ModelT]
    unique_fields: Tuple[str, ...] = ("externalId",)

    async def insert(self, document: ModelT) -> ModelT:
        """Insert a new document and return it as stored."""
        try:
            await document.insert()
        except MongoDuplicateKeyError as e:
            raise await self._duplicate_key_error(e, document) from e
        except PyMongoError as e:
            logger.error(f"Failed to insert {self.entity.lower()}: {e}")
            raise StorageError(str(e)) from e

        return await self._reload(document)

    async def get_by_external_id(self, external_id: str) -> Optional[ModelT]:
        try:
            return await self.model.find_one(self.model.externalId == external_id)
        except PyMongoError as e:
            logger.error(f"Error fetching {self.entity.lower()} {external_id}: {e}")
            raise StorageError(str(e)) from e

    async def replace(self, document: ModelT) -> Optional[ModelT]:
        """
        Replace the stored document with the same id.
        Returns None when nothing matched (deleted in the meantime).
        """
        try:
            await document.replace()
        except DocumentNotFound:
            return None
        except MongoDuplicateKeyError as e:
            raise await self._duplicate_key_error(e, document, exclude_id=document.id) from e
        except PyMongoError as e:
            logger.error(f"Failed to update {self.entity.lower()} {document.externalId}: {e}")
            raise StorageError(str(e)) from e
        return await self._reload(document)

    async def delete_by_external_id(self, external_id: str) -> bool:
        try:
            result = await self.model.find_one(self.model.externalId == external_id).delete()
        except PyMongoError as e:
            logger.error(f"Failed to delete {self.entity.lower()} {external_id}: {e}")
            raise StorageError(str(e)) from e
        return result is not None and result.deleted_count > 0

    async def count(self, *criteria) -> int:
        try:
            return await self.model.find(*criteria).count()
        except PyMongoError as e:
            logger.error(f"Failed to count {self.model.get_collection_name()}: {e}")
            raise StorageError(str(e)) from e

    async def _reload(self, document: ModelT) -> ModelT:
        """The document as stored: BSON keeps datetimes to the millisecond."""
        try:
            stored = await self.model.get(document.id)
        except PyMongoError as e:
            logger.error(f"Error re-reading {self.entity.lower()} {document.id}: {e}")
            raise StorageError(str(e)) from e
        return stored if stored is not None else document

    async def _duplicate_key_error(
        self,
        error: MongoDuplicateKeyError,
        document: ModelT,
        exclude_id: Optional[PydanticObjectId] = None,
    ) -> DuplicateKeyError:
        field = self._field_from_error(error)
        if field is None:
            field = await self._find_colliding_field(document, exclude_id)

        logger.warning(f"Duplicate {self.entity.lower()} rejected on field '{field}'")
        return DuplicateKeyError(self.entity, field)

    @staticmethod
    def _field_from_error(error: MongoDuplicateKeyError) -> Optional[str]:
        """Read the offending field from the server's error details or message."""
        details = error.details or {}
        for key in ("keyPattern", "keyValue"):
            if details.get(key):
                return next(iter(details[key]))

        match = _INDEX_NAME_PATTERN.search(str(error))
        if match:
            return match.group(1)
        return None

    async def _find_colliding_field(
        self,
        document: ModelT,
        exclude_id: Optional[PydanticObjectId],
    ) -> Optional[str]:
        """Fallback when the server did not say which index fired."""
        for field in self.unique_fields:
            value = getattr(document, field, None)
            if value is None:
                continue
            query: Dict[str, Any] = {field: value}
            if exclude_id is not None:
                query["_id"] = {"$ne": exclude_id}
            try:
                if await self.model.find_one(query) is not None:
                    return field
            except PyMongoError as e:
                logger.error(f"Could not resolve duplicate key field: {e}")
                return None
        return None
