from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.cache import CacheManager, create_cache_backend
from app.core.config import settings
from app.core.exceptions import AppException
from app.core.logging import configure_logging
from app.endpoints import user, product, order, payment, dashboard
from app.middleware.exceptions import (
    app_exception_handler,
    global_exception_handler,
    http_exception_handler,
    validation_exception_handler,
)
from app.middleware.logging import RequestLoggingMiddleware

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    app.state.cache = CacheManager(create_cache_backend(settings.REDIS_URL))
    logger.info(f"{settings.PROJECT_NAME} {settings.VERSION} started")
    yield
    await app.state.cache.close()
    logger.info(f"{settings.PROJECT_NAME} stopped")


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

app.add_middleware(GZipMiddleware, minimum_size=1000)
app.add_middleware(RequestLoggingMiddleware)

app.add_exception_handler(AppException, app_exception_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, global_exception_handler)

app.include_router(user.router, prefix=f"{settings.API_V1_STR}/user", tags=["User"])
app.include_router(product.router, prefix=f"{settings.API_V1_STR}/product", tags=["Product"])
app.include_router(order.router, prefix=f"{settings.API_V1_STR}/order", tags=["Order"])
app.include_router(payment.router, prefix=f"{settings.API_V1_STR}/payment", tags=["Payment"])
app.include_router(dashboard.router, prefix=f"{settings.API_V1_STR}/dashboard", tags=["Dashboard"])


@app.get("/")
def root():
    return {"message": "API working"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
