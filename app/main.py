from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.lifespan import lifespan
from app.routers.log_explorer import router as log_explorer_router
from custom_exceptions.provider_config_error import ProviderConfigError
from service.schemas import HealthResponse
from utils.constants import WELCOME_TEXT
from utils.env_config import get_env_config
from utils.logger import logger

app = FastAPI(title="Logs Explorer API", lifespan=lifespan)

# CORS setup
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(log_explorer_router)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    detail = "Method not allowed" if exc.status_code == 405 else exc.detail
    return JSONResponse(status_code=exc.status_code, content={"error": detail}, headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{field}: {first.get('msg')}" if field else first.get("msg")
    else:
        message = "Invalid request body"
    return JSONResponse(status_code=400, content={"error": message})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s", request.url.path)
    return JSONResponse(status_code=500, content={"error": "Internal server error", "message": str(exc)})


@app.get("/", response_class=PlainTextResponse)
async def root():
    return WELCOME_TEXT


@app.get("/api/health", response_model=HealthResponse)
async def health_check():
    try:
        provider = get_env_config().resolve_provider()
    except ProviderConfigError as e:
        logger.warning("Completion service not configured: %s", e.message)
        return HealthResponse(status="healthy", ai_enabled=False)
    return HealthResponse(status="healthy", ai_enabled=True, provider=provider.name)
