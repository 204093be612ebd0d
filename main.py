"""
MediTrack Backend - FastAPI Application Entry Point

Medication schedules, dose tracking and adherence reports.
"""

from contextlib import asynccontextmanager
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder

from core.config import settings
from core.logging import setup_logging, log_request_middleware
from core.database import create_all
from api.v1 import authentication, medications, doses, reports, data

# Setup logging
logger = setup_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    logger.info("Starting MediTrack Backend application...", env=settings.ENV)

    await create_all()

    yield

    logger.info("Shutting down MediTrack Backend application...")


# Create FastAPI application
app = FastAPI(
    title="MediTrack Backend API",
    description="Medication schedules, dose tracking and adherence reports",
    version=settings.VERSION,
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None,
    openapi_url="/openapi.json" if settings.DEBUG else None,
    lifespan=lifespan
)


# Add middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.middleware("http")(log_request_middleware)


def _client_host(request: Request) -> str:
    return request.client.host if request.client else "unknown"


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle validation exceptions."""
    errors = exc.errors()
    logger.warning(
        f"Validation Exception: {errors} | "
        f"Path: {request.url.path} | "
        f"Method: {request.method} | "
        f"Client: {_client_host(request)}"
    )
    user_message = errors[0].get("msg", "Invalid input data") if errors else "Invalid input data"

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "success": False,
            "message": user_message,
            "detail": jsonable_encoder(errors)
        }
    )


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    log = logger.error if exc.status_code >= 500 else logger.info
    log(
        f"HTTP Exception: {exc.detail} | "
        f"Path: {request.url.path} | "
        f"Method: {request.method} | "
        f"Client: {_client_host(request)}"
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "message": exc.detail,
            "detail": str(exc)
        },
        headers=getattr(exc, "headers", None)
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(
        f"Server Exception: {exc} | "
        f"Path: {request.url.path} | "
        f"Method: {request.method} | "
        f"Client: {_client_host(request)}",
        exc_info=exc
    )
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "message": "Internal server error",
            "detail": str(exc)
        }
    )


@app.get("/health", tags=["Health"])
async def health():
    return {"status": "ok", "app": settings.APP_NAME, "version": settings.VERSION}


# Include API routers
app.include_router(authentication.router, prefix="/api/v1/auth", tags=["Authentication"])
app.include_router(medications.router, prefix="/api/v1/medications", tags=["Medications"])
app.include_router(doses.router, prefix="/api/v1/doses", tags=["Doses"])
app.include_router(reports.router, prefix="/api/v1/reports", tags=["Reports"])
app.include_router(data.router, prefix="/api/v1/data", tags=["Data Exchange"])


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower()
    )
