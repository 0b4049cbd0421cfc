from splitledger.db.mongo import mongodb, connect_to_mongo, close_mongo_connection


async def get_database():
    """Return the active database connection."""
    return mongodb.db
