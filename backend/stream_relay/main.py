"""
FastAPI entry point for the Stream Relay
"""

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from stream_relay.config.base import settings
from stream_relay.errors import RelayError
from stream_relay.routers.videos import router as videos_router
from stream_relay.services.stream_service import StreamService, get_stream_service
from stream_relay.utils.logger import get_logger

logger = get_logger(__name__)

app = FastAPI(
    title=f"{settings.APP_NAME} API",
    description="Relays video uploads and status lookups to Cloudflare Stream",
    version=settings.VERSION,
)

# CORS middleware
allowed_origins = ["*"] if settings.DEBUG else settings.ALLOWED_ORIGINS
app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=False,
    allow_methods=["GET", "POST"],
    allow_headers=["Origin", "Content-Type", "Accept", "Authorization"],
)
logger.info(f"CORS allowed origins: {allowed_origins}")


@app.exception_handler(RelayError)
async def relay_error_handler(request: Request, exc: RelayError):
    logger.error(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message} ({exc.details})")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content={"error": "Internal server error", "details": str(exc)})


app.include_router(videos_router, tags=["Videos"])


@app.get("/")
async def root():
    return {"message": f"{settings.APP_NAME} API", "version": settings.VERSION}


@app.get("/health")
async def health_check(stream_service: StreamService = Depends(get_stream_service)):
    return {
        "status": "healthy",
        "services": {
            "cloudflare_stream": "configured" if stream_service.enabled else "not configured"
        }
    }


def run():
    """Console entry point"""
    import uvicorn
    logger.info(f"Server starting on port {settings.API_PORT}...")
    uvicorn.run("stream_relay.main:app", host=settings.API_HOST, port=settings.API_PORT)


if __name__ == "__main__":
    run()
