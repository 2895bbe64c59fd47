# backend/main.py
import logging

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

load_dotenv()

from config import settings
from database import init_db
from utils.errors import LedgerError

# Router imports
from routes.stock import router as stock_router
from routes.brands import router as brands_router
from routes.transactions import router as transactions_router
from routes.stats import router as stats_router
from routes.admin import router as admin_router
from routes.logs import router as logs_router

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Initialization
init_db()

app = FastAPI(title="Liquor Shop Ledger API", version="1.0.0")

# CORS Configuration
origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173"
]

if settings.FRONTEND_URL:
    origins.append(settings.FRONTEND_URL)

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Ledger failures keep their kind so callers can tell them apart
@app.exception_handler(LedgerError)
def ledger_error_handler(request: Request, exc: LedgerError):
    logger.info("%s %s rejected: %s: %s", request.method, request.url.path, exc.kind, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "kind": exc.kind, "detail": exc.message},
    )


# Router registration
app.include_router(stock_router)
app.include_router(brands_router)
app.include_router(transactions_router)
app.include_router(stats_router)
app.include_router(admin_router)
app.include_router(logs_router)

@app.get("/")
def read_root():
    return {"message": "Liquor Shop Ledger API is running"}
