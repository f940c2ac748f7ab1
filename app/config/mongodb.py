from motor.motor_asyncio import AsyncIOMotorClient
import logging


class MongoDB:
    def __init__(self, uri: str, db_name: str):
        self.uri = uri
        self.client = None
        self.db = None
        self.db_name = db_name

    async def init_db(self):
        # Create connection to MongoDB using the connection string
        self.client = AsyncIOMotorClient(self.uri)
        self.db = self.client[self.db_name]

        logging.info(f"Using MongoDB database '{self.db_name}'")

    def get_db(self):
        if self.db is None:
            raise Exception("MongoDB not connected")
        return self.db

    def get_collection(self, name: str):
        return self.get_db()[name]

    def close(self):
        if self.client is not None:
            self.client.close()
            self.client = None
            self.db = None
