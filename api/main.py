"""
FastAPI main application for the BookStore API.
"""

from contextlib import asynccontextmanager
from datetime import datetime
from typing import Annotated

import structlog
from fastapi import Body, Depends, FastAPI, HTTPException, Path, Request, Response, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from api.cache import RedisCacheService
from api.config import config as api_config
from api.database import MongoBookStore
from api.models import (
    OBJECT_ID_PATTERN, BookEnvelope, BookListEnvelope, BookRequest,
    ErrorResponse, HealthResponse, RemoveEnvelope, ServiceError, ServiceResponse
)
from api.service import BooksService
from utilities.config import config
from utilities.logger import setup_logging

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    setup_logging(
        log_level=config.log_level,
        log_format=config.log_format,
        log_file=config.get_log_file_path(),
        debug=config.debug
    )
    logger.info("Starting BookStore API")

    store = MongoBookStore(
        connection_url=config.mongodb_url,
        database_name=config.mongodb_database,
        collection_name=config.mongodb_collection
    )
    try:
        await store.connect()
    except Exception as e:
        logger.error("Failed to connect to database", error=str(e))
        raise

    # The cache only saves latency, so the API starts without it if Redis is down
    cache = None
    if config.cache_enabled:
        cache = RedisCacheService(config.redis_url)
        try:
            await cache.connect()
        except Exception as e:
            logger.warning("Cache unavailable, serving reads from the database", error=str(e))
            cache = None

    app.state.store = store
    app.state.cache = cache
    app.state.books_service = BooksService(store, cache, config.cache_ttl_seconds)

    yield

    logger.info("Shutting down BookStore API")
    if cache:
        await cache.close()
    await store.disconnect()


app = FastAPI(
    title=api_config.api_title,
    description=api_config.api_description,
    version=api_config.api_version,
    contact={
        "name": "BookStore API Support",
        "url": "https://example.com/contact",
    },
    license_info={
        "name": "MIT",
        "url": "https://opensource.org/licenses/MIT",
    },
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=api_config.cors_origins,
    allow_credentials=api_config.cors_allow_credentials,
    allow_methods=api_config.cors_allow_methods,
    allow_headers=api_config.cors_allow_headers,
)


def get_books_service(request: Request) -> BooksService:
    """Return the service built at startup."""
    service = getattr(request.app.state, "books_service", None)
    if service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Books service not available"
        )
    return service


def envelope_response(envelope: ServiceResponse, status_code: int = status.HTTP_200_OK) -> JSONResponse:
    # Prices leave the API as JSON numbers; the cached snapshot keeps them as exact strings
    return JSONResponse(status_code=status_code, content=jsonable_encoder(envelope.model_dump()))


def failure_response(envelope: ServiceResponse, not_found_status: int) -> JSONResponse:
    """Map a failed envelope to its HTTP status."""
    if envelope.error == ServiceError.NOT_FOUND:
        return envelope_response(envelope, not_found_status)
    return envelope_response(envelope, status.HTTP_500_INTERNAL_SERVER_ERROR)


BookId = Annotated[str, Path(pattern=OBJECT_ID_PATTERN, description="24-character hexadecimal book identifier")]


# Exception handlers
@app.exception_handler(HTTPException)
async def http_exception_handler(request, exc: HTTPException):
    """Handle HTTP exceptions."""
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(
            error=exc.detail,
            status_code=exc.status_code
        ).model_dump(),
        headers=exc.headers
    )


@app.exception_handler(Exception)
async def general_exception_handler(request, exc: Exception):
    """Handle general exceptions."""
    logger.error("Unhandled exception", error=str(exc), path=request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ErrorResponse(
            error="Internal server error",
            detail=str(exc) if api_config.debug else None,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
        ).model_dump()
    )


@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check(request: Request):
    """Health check endpoint."""
    store = getattr(request.app.state, "store", None)
    cache = getattr(request.app.state, "cache", None)

    db_status = "unavailable"
    if store:
        db_status = (await store.health_check()).get("status", "unknown")

    cache_status = "disabled"
    if cache:
        cache_status = (await cache.health_check()).get("status", "unknown")

    if db_status != "healthy":
        overall = "unhealthy"
    elif cache_status == "unhealthy":
        overall = "degraded"
    else:
        overall = "healthy"

    return HealthResponse(
        status=overall,
        timestamp=datetime.utcnow(),
        version=api_config.api_version,
        database_status=db_status,
        cache_status=cache_status
    )


@app.get(
    api_config.api_prefix,
    response_model=BookListEnvelope,
    responses={204: {"description": "No books are stored"}},
    tags=["Books"]
)
async def get_books(service: BooksService = Depends(get_books_service)):
    """Get all books."""
    result = await service.get_books()
    if result.success:
        return envelope_response(result)
    if result.not_found:
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    return failure_response(result, status.HTTP_404_NOT_FOUND)


@app.get(
    api_config.api_prefix + "/{book_id}",
    response_model=BookEnvelope,
    responses={404: {"model": BookEnvelope}},
    tags=["Books"]
)
async def get_book(book_id: BookId, service: BooksService = Depends(get_books_service)):
    """
    Get a single book by ID.

    - **book_id**: MongoDB ObjectId of the book
    """
    result = await service.get_book_by_id(book_id)
    if result.success:
        return envelope_response(result)
    return failure_response(result, status.HTTP_404_NOT_FOUND)


@app.post(
    api_config.api_prefix,
    response_model=BookEnvelope,
    responses={400: {"model": BookEnvelope}},
    tags=["Books"]
)
async def add_book(
    new_book: BookRequest = Body(...),
    service: BooksService = Depends(get_books_service)
):
    """Add a new book. The response carries the generated identifier."""
    result = await service.add_book(new_book)
    if result.success:
        return envelope_response(result)
    logger.warning("Book not added", message=result.message)
    return envelope_response(result, status.HTTP_400_BAD_REQUEST)


@app.patch(
    api_config.api_prefix + "/{book_id}",
    response_model=BookEnvelope,
    responses={400: {"model": BookEnvelope}},
    tags=["Books"]
)
async def update_book(
    book_id: BookId,
    updated_book: BookRequest = Body(...),
    service: BooksService = Depends(get_books_service)
):
    """
    Replace every field of an existing book.

    Unknown ids are rejected with 400; no book is created.
    """
    result = await service.update_book(book_id, updated_book)
    if result.success:
        return envelope_response(result)
    return failure_response(result, status.HTTP_400_BAD_REQUEST)


@app.delete(
    api_config.api_prefix + "/{book_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": RemoveEnvelope}},
    tags=["Books"]
)
async def remove_book(book_id: BookId, service: BooksService = Depends(get_books_service)):
    """Remove a book."""
    result = await service.remove_book(book_id)
    if result.success:
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    return failure_response(result, status.HTTP_404_NOT_FOUND)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "api.main:app",
        host=api_config.host,
        port=api_config.port,
        reload=api_config.debug,
        log_level=api_config.log_level.lower()
    )
