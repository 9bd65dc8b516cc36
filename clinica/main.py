from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
import time
import logging

from .api.v1.admin import router as admin_router
from .api.v1.auth import router as auth_router
from .api.v1.citas import router as citas_router
from .api.v1.users import router as users_router
from .core.config import settings
from .core.database import SessionLocal, init_db
from .services.auth_service import AuthService

# Configure logging
logging.basicConfig(level=logging.DEBUG if settings.DEBUG else logging.INFO)
logger = logging.getLogger(__name__)

def seed_admin():
    """Create the bootstrap admin configured through ADMIN_USERNAME / ADMIN_PASSWORD."""
    if not (settings.ADMIN_USERNAME and settings.ADMIN_PASSWORD):
        return

    db = SessionLocal()
    try:
        AuthService(db).ensure_admin(
            settings.ADMIN_USERNAME,
            settings.ADMIN_PASSWORD,
            settings.ADMIN_EMAIL,
            settings.ADMIN_FULL_NAME,
        )
    finally:
        db.close()

@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting Clinica Appointment API...")

    db_url = settings.get_database_url
    db_type = "PostgreSQL" if "postgresql" in db_url else "SQLite" if "sqlite" in db_url else "Unknown"
    logger.info(f"Using {db_type} database")

    try:
        init_db()
        seed_admin()
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Failed to initialize database: {str(e)}")
        raise

    logger.info("Application startup complete")
    yield
    logger.info("Shutting down Clinica Appointment API...")

# Create FastAPI application
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.VERSION,
    description="Appointment booking API for a medical clinic",
    lifespan=lifespan,
)

# Middleware setup
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Custom middleware for request logging and timing
@app.middleware("http")
async def add_process_time_header(request: Request, call_next):
    start_time = time.time()
    response = await call_next(request)
    process_time = time.time() - start_time
    response.headers["X-Process-Time"] = str(process_time)

    logger.info(
        f"{request.method} {request.url.path} - "
        f"Status: {response.status_code} - "
        f"Time: {process_time:.4f}s"
    )

    return response

# Exception handlers, every error body is {"msg": ...}
@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    msg = exc.detail
    if exc.status_code == 404 and msg == "Not Found":
        msg = "Recurso no encontrado"
    return JSONResponse(
        status_code=exc.status_code,
        content={"msg": msg},
        headers=getattr(exc, "headers", None),
    )

@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    logger.debug(f"Invalid request to {request.url.path}: {errors}")
    if any(error.get("type") == "missing" for error in errors):
        msg = "Faltan datos requeridos"
    else:
        msg = "Datos no válidos"
    return JSONResponse(status_code=400, content={"msg": msg})

@app.exception_handler(Exception)
async def internal_error_handler(request: Request, exc: Exception):
    logger.exception(f"Internal server error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=500,
        content={"msg": "Error del servidor"}
    )

# Include routers
app.include_router(auth_router)
app.include_router(citas_router)
app.include_router(users_router)
app.include_router(admin_router)

# Health check endpoint
@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "timestamp": time.time(),
        "version": settings.VERSION
    }

# Root endpoint
@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "message": "Welcome to Clinica Appointment API",
        "version": settings.VERSION,
        "docs": "/docs",
        "health": "/health",
        "endpoints": {
            "authentication": "/auth",
            "appointments": "/citas",
            "users": "/users",
            "admin": "/admin"
        }
    }

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "clinica.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
        log_level="info"
    )
