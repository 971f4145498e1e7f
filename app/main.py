import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import Depends, FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.database.connection import Base, engine, get_db
from app.models import model
from app.repositories.settings import settings
from app.routers import (
    account_router,
    budget_router,
    category_router,
    transaction_router,
    user_router,
)
from app.utils import api_response
from app.utils.api_errors import ApiError
from app.version import __version__

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # stuff to do when app starts
    Base.metadata.create_all(bind=engine)
    logger.info(f"pocketledger-api {__version__} started")
    yield
    # stuff to do when app stops


app = FastAPI(version=__version__, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    details = exc.details if isinstance(exc, ApiError) else None
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.detail}")
    return JSONResponse(
        status_code=exc.status_code,
        content=jsonable_encoder(api_response.error(str(exc.detail), exc.status_code, details)),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if any(error.get("type") == "missing" for error in errors):
        message = "All fields are required"
    elif any(tuple(error.get("loc", ()))[-1:] == ("email",) for error in errors):
        message = "Invalid email format"
    else:
        message = "Invalid request data"
    return JSONResponse(
        status_code=400,
        content=jsonable_encoder(api_response.error(message, 400, errors)),
    )


@app.get("/", tags=["system"])
def health(db: Session = Depends(get_db)):
    return {
        "message": "Server is running",
        "version": __version__,
        "usersCount": db.query(model.User).count(),
        "categoriesCount": db.query(model.Category).count(),
    }


app.include_router(user_router.user_Router)
app.include_router(account_router.account_Router)
app.include_router(category_router.category_Router)
app.include_router(transaction_router.transaction_Router)
app.include_router(budget_router.budget_Router)

if __name__ == "__main__":
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
