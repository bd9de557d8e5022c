"""
Main FastAPI application.
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Depends, FastAPI, File, HTTPException, Request, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from pdf2jpg.converters import get_converter
from pdf2jpg.pipeline import ConversionPipeline, ConversionError, ConversionTimeoutError
from server import __version__
from server.auth import get_current_user, get_current_user_id
from server.config import Settings, get_cors_origins, get_settings
from server.db import (
    ConversionStore,
    EmailAlreadyRegistered,
    User,
    UserStore,
    create_session_factory,
    get_db,
)
from server.models import (
    AuthResponse,
    ConvertResponse,
    FileOut,
    FilesResponse,
    LoginRequest,
    MeResponse,
    SignupRequest,
    UserOut,
)
from server.security import PasswordHasher, TokenService
from server.storage import LocalFileStorage, StorageError

logger = logging.getLogger(__name__)

PDF_MEDIA_TYPE = "application/pdf"


def _configure_services(app: FastAPI, settings: Settings) -> None:
    """Build the long-lived services once and hang them off app.state."""
    app.state.settings = settings
    app.state.engine, app.state.session_factory = create_session_factory(settings.database_url)
    app.state.password_hasher = PasswordHasher(rounds=settings.bcrypt_rounds)
    app.state.token_service = TokenService(
        secret_key=settings.secret_key,
        algorithm=settings.jwt_algorithm,
        expires_minutes=settings.access_token_expire_minutes,
    )
    app.state.storage = LocalFileStorage(Path(settings.upload_dir))
    app.state.storage.ensure_root()
    app.state.pipeline = ConversionPipeline(
        converter=get_converter(settings.converter, delay=settings.conversion_delay),
        timeout=settings.conversion_timeout,
        url_prefix=settings.artifact_url_prefix,
    )


router = APIRouter()


# --- API Endpoints ---

@router.get("/")
async def root():
    """Health check endpoint."""
    return {"status": "ok", "message": "PDF to JPG API is running"}


@router.post("/api/auth/signup", response_model=AuthResponse)
async def signup(data: SignupRequest, request: Request, db: Session = Depends(get_db)):
    """Create an account and return a token for it."""
    if not data.email or not data.email.strip() or not data.password:
        raise HTTPException(status_code=400, detail="Email and password are required")

    if "\x00" in data.password:
        raise HTTPException(status_code=400, detail="Password must not contain NUL characters")

    hasher: PasswordHasher = request.app.state.password_hasher
    token_service: TokenService = request.app.state.token_service

    # bcrypt is CPU bound; keep it off the event loop
    password_hash = await run_in_threadpool(hasher.hash, data.password)

    try:
        user = UserStore(db).create(
            email=data.email,
            password_hash=password_hash,
            name=data.name,
        )
    except EmailAlreadyRegistered:
        raise HTTPException(status_code=400, detail="User with this email already exists")

    logger.info(f"[Auth] Created account {user.id}")

    return AuthResponse(
        message="User created successfully",
        token=token_service.issue(user.id),
        user=UserOut.model_validate(user),
    )


@router.post("/api/auth/login", response_model=AuthResponse)
async def login(data: LoginRequest, request: Request, db: Session = Depends(get_db)):
    """Exchange email and password for a token."""
    if not data.email or not data.password:
        raise HTTPException(status_code=400, detail="Email and password are required")

    hasher: PasswordHasher = request.app.state.password_hasher
    token_service: TokenService = request.app.state.token_service

    user = UserStore(db).get_by_email(data.email)

    # Same response for unknown email and wrong password
    if user is None or not await run_in_threadpool(hasher.verify, data.password, user.password_hash):
        raise HTTPException(
            status_code=401,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return AuthResponse(
        message="Login successful",
        token=token_service.issue(user.id),
        user=UserOut.model_validate(user),
    )


@router.get("/api/auth/me", response_model=MeResponse)
async def me(user: User = Depends(get_current_user)):
    """Return the account behind the bearer token."""
    return MeResponse(user=UserOut.model_validate(user))


@router.post("/api/convert", response_model=ConvertResponse)
async def convert_pdf(
    request: Request,
    pdf: Optional[UploadFile] = File(None),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """
    Upload a PDF, convert it, and record the result for the caller.

    Nothing is written to disk until the upload has passed validation, and
    no record is written unless both the upload and the conversion finished.
    """
    if pdf is None or not pdf.filename:
        raise HTTPException(status_code=400, detail="No file provided")

    if pdf.content_type != PDF_MEDIA_TYPE:
        raise HTTPException(status_code=400, detail="Only PDF files are allowed")

    storage: LocalFileStorage = request.app.state.storage
    pipeline: ConversionPipeline = request.app.state.pipeline

    content = await pdf.read()

    try:
        stored_path = await storage.save(pdf.filename, content)
    except StorageError:
        logger.exception("[Convert] Failed to store upload")
        raise HTTPException(status_code=500, detail="Internal server error")

    try:
        result = await pipeline.run(stored_path)
    except ConversionTimeoutError:
        logger.error(f"[Convert] Timed out converting {stored_path.name}")
        await storage.delete(stored_path)
        raise HTTPException(status_code=504, detail="Conversion timed out")
    except (ConversionError, FileNotFoundError):
        logger.exception(f"[Convert] Failed to convert {stored_path.name}")
        await storage.delete(stored_path)
        raise HTTPException(status_code=500, detail="Internal server error")

    try:
        record = ConversionStore(db).create(
            user_id=user_id,
            original_name=pdf.filename,
            image_url=result.artifact_url,
            stored_path=str(stored_path),
        )
    except Exception:
        logger.exception("[Convert] Failed to save conversion record")
        await storage.delete(stored_path)
        raise HTTPException(status_code=500, detail="Internal server error")

    logger.info(f"[Convert] Recorded conversion {record.id} for {user_id}")

    return ConvertResponse(
        message="File converted successfully",
        file=FileOut.from_record(record),
    )


@router.get("/api/files", response_model=FilesResponse)
async def list_files(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """List the caller's conversions, newest first."""
    records = ConversionStore(db).list_for_user(user_id)
    return FilesResponse(files=[FileOut.from_record(record) for record in records])


# --- Error handlers ---

async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content={"detail": "Invalid request body"})


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(
        f"[Server] Unhandled error on {request.method} {request.url.path}",
        exc_info=exc,
    )
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the application.

    Settings are loaded from the environment at startup unless passed in.
    """

    # Lifespan context manager
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        _configure_services(app, settings or get_settings())
        logger.info("[Server] Services ready")
        yield
        # Shutdown
        app.state.engine.dispose()

    app = FastAPI(
        title="PDF to JPG API",
        description="Upload PDFs, convert them to JPG, and browse your conversion history",
        version=__version__,
        lifespan=lifespan,
    )

    # CORS middleware
    cors_origins = settings.cors_origins if settings else get_cors_origins()
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
    app.include_router(router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    from server.logging_config import get_logging_config

    uvicorn.run(app, host="0.0.0.0", port=8000, log_config=get_logging_config())
