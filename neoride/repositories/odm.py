"""
Binds the beanie document classes to a database handle.

Runs as the ConnectionManager's on_connect hook. A failed bind fails the
connection attempt. A failed index build (existing documents violate it)
is logged and the connection stands.
"""
import logging

from beanie.odm.utils.init import Initializer
from pymongo.errors import PyMongoError

from neoride.models.customer import Customer
from neoride.models.driver import Driver

logger = logging.getLogger(__name__)

DOCUMENT_MODELS = [Customer, Driver]


async def init_documents(database) -> None:
    """Initialize beanie on `database`, then build each collection's indexes."""
    initializer = Initializer(
        database=database,
        document_models=DOCUMENT_MODELS,
        skip_indexes=True,
    )
    await initializer

    for model in DOCUMENT_MODELS:
        name = model.get_collection_name()
        try:
            await initializer.init_indexes(model)
        except PyMongoError as e:
            logger.error(f"Could not build indexes on '{name}', continuing without them: {e}")
        else:
            logger.debug(f"Indexes ensured on {name}")
