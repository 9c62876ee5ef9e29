from motor.motor_asyncio import AsyncIOMotorClient
from .config import settings

client = AsyncIOMotorClient(settings.mongo_uri)
db = client[settings.mongo_db]

products_coll = db[settings.products_collection]


def get_db():
    return db


def get_products_coll():
    return products_coll
