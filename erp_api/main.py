# Main application file

import logging
import time

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from erp_api.core.config import settings
from erp_api.core.rate_limiter import limiter
from erp_api.database import Base, engine
from erp_api.routers import (
    analytics,
    companies,
    customers,
    employees,
    invoices,
    orders,
    payments,
    products,
    quotes,
    sales,
    transactions,
    users,
)


# LOGGING CONFIGURATION

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s | %(levelname)s | %(message)s",
)

logger = logging.getLogger("app")


# APP INIT

app = FastAPI(
    title="Business Management API",
    description="Orders, quotes, invoices, payments, sales, finance and staff records with PDF reports",
    version="1.0.0",
    debug=settings.DEBUG,
)


# CORS

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["Authorization", "Content-Type"],
)


# RATE LIMITING

app.state.limiter = limiter


# ERROR HANDLERS
# Every failure leaves the API as {"error": "<message>"}

@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    messages = []
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        field = ".".join(loc) or "request"
        messages.append(f"{field}: {error.get('msg')}")

    return JSONResponse(status_code=400, content={"error": "; ".join(messages)})


@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    logger.warning(f"Rate limit exceeded: {request.method} {request.url.path}")
    return JSONResponse(
        status_code=429,
        content={"error": f"Rate limit exceeded: {exc.detail}"},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


# REQUEST LOGGING MIDDLEWARE

@app.middleware("http")
async def log_requests(request: Request, call_next):
    start_time = time.time()

    response = await call_next(request)

    duration = round((time.time() - start_time) * 1000, 2)

    logger.info(
        f"{request.method} {request.url.path} "
        f"Status: {response.status_code} "
        f"Time: {duration}ms"
    )

    return response


# DATABASE

if settings.AUTO_CREATE_TABLES:
    import erp_api.models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    logger.info("Database tables ensured")


# ROUTERS

for module in (
    companies,
    customers,
    products,
    orders,
    invoices,
    quotes,
    sales,
    transactions,
    payments,
    employees,
    users,
    analytics,
):
    app.include_router(module.router, prefix=settings.API_PREFIX)


# HEALTH

@app.get("/")
def root():
    logger.info("Health check endpoint called")
    return {"status": "OK", "message": "API is running"}


@app.get(f"{settings.API_PREFIX}/health")
def health():
    return {"status": "OK", "message": "API is running"}
