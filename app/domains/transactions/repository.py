import logging
from typing import Any, Dict, List, Optional

from bson import ObjectId

from app.domains.transactions.filters import MatchAll, Predicate


def convert_objectid_to_str(doc):
    if isinstance(doc, list):
        return [convert_objectid_to_str(d) for d in doc]
    if isinstance(doc, dict):
        return {k: (str(v) if isinstance(v, ObjectId) else convert_objectid_to_str(v)) for k, v in doc.items()}
    return doc


class TransactionStore:
    """Transactions collection access; filters come in as predicates."""

    def __init__(self, collection):
        self.collection = collection

    async def insert_many(self, documents: List[Dict[str, Any]]) -> int:
        if not documents:
            return 0
        insert_result = await self.collection.insert_many(documents)
        logging.info(f"Inserted {len(insert_result.inserted_ids)} transactions")
        return len(insert_result.inserted_ids)

    async def count(self, predicate: Optional[Predicate] = None) -> int:
        predicate = predicate or MatchAll()
        return await self.collection.count_documents(predicate.to_query())

    async def find(
        self,
        predicate: Optional[Predicate] = None,
        skip: int = 0,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        predicate = predicate or MatchAll()
        # sort by _id so skip/limit pages never overlap
        cursor = self.collection.find(predicate.to_query()).sort("_id", 1)
        if skip:
            cursor = cursor.skip(skip)
        if limit:
            cursor = cursor.limit(limit)
        results = await cursor.to_list(length=None)
        return convert_objectid_to_str(results)
