# backend/main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv

load_dotenv()

from config import settings
from database import init_db, reset_engine
from utils.logging_config import setup_logging

# Import routerów
from routes.auth import router as auth_router
from routes.company import router as company_router
from routes.products import router as products_router
from routes.stock import router as stock_router
from routes.stats import router as stats_router
from routes.reports import router as reports_router
from utils.invalidation import INVALIDATE_HEADER

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    init_db()
    logger.info("Inventory App API started")
    yield
    reset_engine()


app = FastAPI(title="Inventory App API", version="1.0.0", lifespan=lifespan)

# CORS Configuration
origins = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]

if settings.FRONTEND_URL:
    origins.append(settings.FRONTEND_URL)

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    # Clients read this to know which cached views to refresh
    expose_headers=[INVALIDATE_HEADER],
)

# Rejestracja routerów
app.include_router(auth_router)
app.include_router(company_router)
app.include_router(products_router)
app.include_router(stats_router)
app.include_router(reports_router)

# Rejestracja Stock
app.include_router(stock_router, prefix="/stock")

@app.get("/")
def read_root():
    return {"message": "Inventory App API is running"}
