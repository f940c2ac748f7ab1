from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from app.domains.transactions.routes import router as transaction_router
from app.domains.transactions.repository import TransactionStore
from app.domains.transactions.services import TransactionService
from app.shared.seed_source import SeedSource
from app.config.mongodb import MongoDB
from app.config.setting import settings
import logging
import uvicorn
from dotenv import load_dotenv

load_dotenv()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s [%(levelname)s] %(name)s - %(message)s"
)

app = FastAPI(title=settings.app_name)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.parsed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StarletteHTTPException)
async def plain_text_http_exception(request: Request, exc: StarletteHTTPException):
    return PlainTextResponse(str(exc.detail), status_code=exc.status_code)


@app.on_event("startup")
async def startup():
    logging.info(f"Starting {settings.app_name} ({settings.environment})")

    # Initialize MongoDB connection
    mongodb = MongoDB(uri=settings.mongo_uri, db_name=settings.mongo_db_name)
    try:
        await mongodb.init_db()
        store = TransactionStore(mongodb.get_collection(settings.mongo_collection))
        count = await store.count()
        logging.info(f"MongoDB connected. Found {count} documents in '{settings.mongo_collection}' collection.")
    except Exception as e:
        logging.error(f"MongoDB connection failed: {str(e)}")
        raise

    app.state.mongodb = mongodb
    app.state.transaction_service = TransactionService(
        store,
        SeedSource(settings.seed_url),
        skip_if_populated=settings.seed_skip_if_populated,
    )


@app.on_event("shutdown")
def shutdown_db():
    mongodb = getattr(app.state, "mongodb", None)
    if mongodb is not None:
        mongodb.close()


app.include_router(transaction_router, tags=["Transaction"])


if __name__ == "__main__":
    uvicorn.run(app, host=settings.host, port=settings.port)
