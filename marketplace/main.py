import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from marketplace.config import settings
from marketplace.database import engine
from marketplace.errors import AttachmentIOError, AttachmentNotFound, Forbidden, ValidationError
from marketplace.routers import ads, auth, images, users

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    settings.IMAGES_DIR.mkdir(parents=True, exist_ok=True)
    logger.info("Serving attachments from %s", settings.IMAGES_DIR.resolve())
    yield
    # Shutdown
    await engine.dispose()

app = FastAPI(
    title="Marketplace API",
    description="Classified ads with pictures and comments",
    version="1.0.0",
    lifespan=lifespan,
)

# Middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Service errors -> HTTP status codes
@app.exception_handler(Forbidden)
async def forbidden_handler(request: Request, exc: Forbidden):
    return JSONResponse(status_code=403, content={"detail": str(exc)})

@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    return JSONResponse(status_code=400, content={"detail": str(exc)})

@app.exception_handler(AttachmentNotFound)
async def attachment_not_found_handler(request: Request, exc: AttachmentNotFound):
    return JSONResponse(status_code=404, content={"detail": str(exc)})

@app.exception_handler(AttachmentIOError)
async def attachment_io_error_handler(request: Request, exc: AttachmentIOError):
    logger.error("Attachment operation failed on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=500, content={"detail": "Attachment operation failed"})

# Routers
app.include_router(auth.router)
app.include_router(ads.router)
app.include_router(users.router)
app.include_router(images.router)

@app.get("/health")
async def health():
    return {"status": "healthy", "version": "1.0.0"}
