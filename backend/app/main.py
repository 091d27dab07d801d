"""FastAPI application entry point."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.routes import CONVERT_PATH, convert_preflight, router
from app.config import CORS_ORIGINS, GENERIC_FAILURE_MESSAGE, STATIC_DIR, logger as config_logger
from app.errors import ConverterError, InvalidInput

logging.getLogger("uvicorn").setLevel(logging.INFO)


@asynccontextmanager
async def lifespan(app: FastAPI):
    config_logger.info("CMYK Converter API started")
    yield
    config_logger.info("CMYK Converter API shutting down")


app = FastAPI(
    title="CMYK Converter API",
    description="Convert JPEG and PNG images to CMYK TIFF for print.",
    version="1.0.0",
    lifespan=lifespan,
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS if CORS_ORIGINS else ["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


async def convert_preflight_middleware(request: Request, call_next):
    """Answer browser preflights for the convert endpoint with its fixed CORS headers."""
    if (
        request.method == "OPTIONS"
        and request.url.path == CONVERT_PATH
        and "access-control-request-method" in request.headers
    ):
        return convert_preflight()
    return await call_next(request)


# Registered after CORSMiddleware so it runs first
app.middleware("http")(convert_preflight_middleware)


@app.exception_handler(ConverterError)
async def converter_error_handler(request: Request, exc: ConverterError):
    if exc.status_code >= 500:
        config_logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse({"error": exc.message}, status_code=exc.status_code)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    config_logger.info("%s %s -> %s: %s", request.method, request.url.path, exc.status_code, exc.detail)
    return JSONResponse({"error": str(exc.detail)}, status_code=exc.status_code, headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    config_logger.info("Rejected malformed request on %s: %s", request.url.path, exc.errors())
    # A non-file value in the image field means no file was sent
    if any("image" in err.get("loc", ()) for err in exc.errors()):
        err = InvalidInput("No file provided")
    else:
        err = InvalidInput("Invalid request")
    return JSONResponse({"error": err.message}, status_code=err.status_code)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    config_logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    return JSONResponse({"error": GENERIC_FAILURE_MESSAGE}, status_code=500)


@app.get("/", include_in_schema=False)
def index():
    return FileResponse(STATIC_DIR / "index.html", media_type="text/html")


app.include_router(router)


if __name__ == "__main__":
    import uvicorn
    from app.config import HOST, PORT
    uvicorn.run("app.main:app", host=HOST, port=PORT, reload=True)
