from fastapi import APIRouter, Request, Depends, HTTPException
from fastapi.responses import PlainTextResponse
import logging
from typing import List, Optional
from app.domains.transactions.models import (
    CategoryCount,
    CombinedData,
    PriceRangeCount,
    Statistics,
    TransactionPage,
)
from app.domains.transactions.services import TransactionService

logger = logging.getLogger(__name__)

router = APIRouter()


# Dependency to get the transaction service from app.state
def get_transaction_service(request: Request) -> TransactionService:
    return request.app.state.transaction_service


@router.get("/initialize_database", response_class=PlainTextResponse)
async def initialize_database(service: TransactionService = Depends(get_transaction_service)):
    try:
        await service.initialize_database()
        return "Database initialized with seed data"
    except Exception as e:
        logger.error(f"Error initializing database: {e}")
        raise HTTPException(status_code=500, detail="Error initializing database")


@router.get("/list_transactions", response_model=TransactionPage)
async def list_transactions(
    month: Optional[str] = None,
    search_text: Optional[str] = None,
    page: int = 1,
    per_page: int = 10,
    service: TransactionService = Depends(get_transaction_service)
):
    try:
        return await service.list_transactions(month, search_text, page=page, per_page=per_page)
    except Exception as e:
        logger.error(f"Error listing transactions: {e}")
        raise HTTPException(status_code=500, detail="Error listing transactions")


@router.get("/statistics", response_model=Statistics)
async def get_statistics(month: str, service: TransactionService = Depends(get_transaction_service)):
    try:
        return await service.get_statistics(month)
    except Exception as e:
        logger.error(f"Error calculating statistics: {e}")
        raise HTTPException(status_code=500, detail="Error calculating statistics")


@router.get("/bar_chart", response_model=List[PriceRangeCount])
async def get_bar_chart(month: str, service: TransactionService = Depends(get_transaction_service)):
    try:
        return await service.get_bar_chart(month)
    except Exception as e:
        logger.error(f"Error generating bar chart data: {e}")
        raise HTTPException(status_code=500, detail="Error generating bar chart data")


@router.get("/pie_chart", response_model=List[CategoryCount])
async def get_pie_chart(month: str, service: TransactionService = Depends(get_transaction_service)):
    try:
        return await service.get_pie_chart(month)
    except Exception as e:
        logger.error(f"Error generating pie chart data: {e}")
        raise HTTPException(status_code=500, detail="Error generating pie chart data")


@router.get("/combined_data", response_model=CombinedData)
async def get_combined_data(month: str, service: TransactionService = Depends(get_transaction_service)):
    try:
        return await service.get_combined_data(month)
    except Exception as e:
        logger.error(f"Error fetching combined data: {e}")
        raise HTTPException(status_code=500, detail="Error fetching combined data")
