import asyncio
import logging
from typing import Optional

from fastapi.concurrency import run_in_threadpool

from app.domains.transactions.filters import listing_filter, month_filter
from app.domains.transactions.models import Transaction
from app.domains.transactions.reporting import (
    category_breakdown,
    page_window,
    price_histogram,
    summarize,
)
from app.domains.transactions.repository import TransactionStore
from app.shared.seed_source import SeedSource


class TransactionService:
    def __init__(self, store: TransactionStore, seed_source: SeedSource, skip_if_populated: bool = False):
        self.store = store
        self.seed_source = seed_source
        self.skip_if_populated = skip_if_populated

    async def initialize_database(self) -> int:
        """Load the seed records into the store and return how many were inserted.

        Seeding appends, so running it twice duplicates every record unless
        ``skip_if_populated`` is set.
        """
        existing = await self.store.count()
        if existing:
            if self.skip_if_populated:
                logging.info(f"Collection already holds {existing} transactions, skipping seed")
                return 0
            logging.warning(f"Collection already holds {existing} transactions, seeding again will duplicate them")

        seed_data = await run_in_threadpool(self.seed_source.fetch)
        documents = [Transaction.model_validate(item).model_dump() for item in seed_data]
        inserted = await self.store.insert_many(documents)
        logging.info(f"Database initialized with {inserted} seed transactions")
        return inserted

    async def list_transactions(
        self,
        month: Optional[str] = None,
        search_text: Optional[str] = None,
        page: int = 1,
        per_page: int = 10,
    ):
        query = listing_filter(month, search_text)
        skip, limit = page_window(page, per_page)

        total = await self.store.count(query)
        transactions = await self.store.find(query, skip=skip, limit=limit)
        return {"total": total, "transactions": transactions}

    async def _month_transactions(self, month: str):
        return await self.store.find(month_filter(month))

    async def get_statistics(self, month: str):
        return summarize(await self._month_transactions(month))

    async def get_bar_chart(self, month: str):
        return price_histogram(await self._month_transactions(month))

    async def get_pie_chart(self, month: str):
        return category_breakdown(await self._month_transactions(month))

    async def get_combined_data(self, month: str):
        transactions, statistics, bar_chart, pie_chart = await asyncio.gather(
            self.list_transactions(month=month),
            self.get_statistics(month),
            self.get_bar_chart(month),
            self.get_pie_chart(month),
        )
        return {
            "transactions": transactions,
            "statistics": statistics,
            "barChart": bar_chart,
            "pieChart": pie_chart,
        }
