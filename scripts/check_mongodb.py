"""
Standalone MongoDB connectivity check.

Connects with the configured MONGODB_URI, lists the collections, and
round-trips a test document through the "connectiontests" collection.
Exits non-zero when anything fails.
"""
import asyncio
import sys

from pymongo import AsyncMongoClient
from pymongo.errors import PyMongoError

from neoride.core.config import settings
from neoride.services.base import utcnow

TEST_COLLECTION = "connectiontests"


def mask_uri(uri: str) -> str:
    # Keep only the host part; credentials sit before the '@'
    return uri.split("@")[-1] if "@" in uri else uri


def print_troubleshooting() -> None:
    print("\nTroubleshooting:")
    print("  1. Check that MONGODB_URI is correct and includes the database name")
    print("  2. Make sure your IP address is allowed in the Atlas network access list")
    print("  3. Verify the database user name and password")
    print("  4. Check that the cluster is running and reachable from this network")


async def main() -> int:
    if not settings.MONGODB_URI:
        print("❌ MONGODB_URI environment variable is not set")
        print_troubleshooting()
        return 1

    print(f"Connecting to DB: {mask_uri(settings.MONGODB_URI)}")
    client = AsyncMongoClient(settings.MONGODB_URI, **settings.driver_options())
    try:
        await client.admin.command("ping")
        db = client.get_default_database(default=settings.DATABASE_NAME)
        print(f"✅ Connected. Database Name: {db.name}")

        collections = sorted(await db.list_collection_names())
        print(f"\nCollections ({len(collections)}):")
        for name in collections:
            count = await db[name].count_documents({})
            print(f"  - {name}: {count} documents")

        sample = {"message": "connection test", "createdAt": utcnow()}
        result = await db[TEST_COLLECTION].insert_one(sample)
        found = await db[TEST_COLLECTION].find_one({"_id": result.inserted_id})
        await db[TEST_COLLECTION].delete_one({"_id": result.inserted_id})
        if found is None:
            print("❌ Test document was written but could not be read back")
            return 1
        print("✅ Write / read / delete round trip succeeded")
        return 0
    except PyMongoError as e:
        print(f"❌ MongoDB check failed: {e}")
        print_troubleshooting()
        return 1
    finally:
        await client.close()


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
