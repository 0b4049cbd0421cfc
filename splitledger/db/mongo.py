import logging
from decimal import Decimal

from bson.codec_options import CodecOptions, TypeCodec, TypeRegistry
from bson.decimal128 import Decimal128
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from splitledger.core.config import settings

logger = logging.getLogger(__name__)


class DecimalCodec(TypeCodec):
    """Store Python Decimals as BSON Decimal128 and read them back."""
    python_type = Decimal
    bson_type = Decimal128

    def transform_python(self, value):
        return Decimal128(value)

    def transform_bson(self, value):
        return value.to_decimal()


CODEC_OPTIONS = CodecOptions(
    type_registry=TypeRegistry([DecimalCodec()]),
    tz_aware=True,
)


class MongoDatabase:
    """MongoDB connection manager."""

    client: AsyncIOMotorClient = None
    db: AsyncIOMotorDatabase = None

mongodb = MongoDatabase()

async def connect_to_mongo():
    """Connect to MongoDB."""
    mongodb.client = AsyncIOMotorClient(settings.MONGODB_URL)
    mongodb.db = mongodb.client.get_database(
        settings.DATABASE_NAME, codec_options=CODEC_OPTIONS
    )

    await create_indexes()
    logger.info("Connected to MongoDB: %s", settings.DATABASE_NAME)

async def close_mongo_connection():
    """Disconnect from MongoDB."""
    if mongodb.client is not None:
        mongodb.client.close()
    logger.info("Disconnected from MongoDB")

async def create_indexes():
    """Create database indexes."""
    await mongodb.db["users"].create_index("email", unique=True)

    # Membership lookups
    await mongodb.db["groups"].create_index([("members.user_id", 1)])

    # Expenses and their splits
    await mongodb.db["expenses"].create_index([("group_id", 1), ("expense_date", -1)])
    await mongodb.db["expense_splits"].create_index("expense_id")

    # Settlements
    await mongodb.db["settlements"].create_index([("group_id", 1), ("status", 1)])

def get_db() -> AsyncIOMotorDatabase:
    """Get database instance."""
    return mongodb.db
