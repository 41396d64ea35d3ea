import logging
import time
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_fastapi_instrumentator import Instrumentator
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address
from starlette.middleware.base import BaseHTTPMiddleware

from videohub.auth.routing import router as auth_router
from videohub.backend import Backend, BackendService, ServiceContext
from videohub.config import settings
from videohub.errors import NotAuthorized, VideoHubError
from videohub.proxy import DispatchProxy
from videohub.social.routing import router as social_router
from videohub.users.routing import router as users_router
from videohub.videos.routing import router as videos_router

# Logging
_level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
logging.basicConfig(
    level=_level,
    format='%(asctime)s %(levelname)s %(name)s %(message)s',
)
for _logger_name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
    logging.getLogger(_logger_name).setLevel(_level)

logger = logging.getLogger("main")

origins = [origin for origin in settings.CORS_ORIGINS if origin]


def create_backend(replicas: Optional[int] = None) -> Backend:
    """One shared ServiceContext; several replicas go behind a DispatchProxy."""
    replicas = settings.BACKEND_REPLICAS if replicas is None else replicas
    context = ServiceContext()
    if replicas <= 1:
        return BackendService(context)
    logger.info(f"Dispatching round-robin over {replicas} backend replicas")
    return DispatchProxy([BackendService(context) for _ in range(replicas)])


class LoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        start_time = time.time()
        client_host = request.client.host if request.client else "-"
        logger.info(f"Request: {request.method} {request.url.path} from {client_host}")
        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(f"Request failed: {request.method} {request.url.path} - {str(e)}")
            raise
        process_time = time.time() - start_time
        logger.info(f"Response: {request.method} {request.url.path} {response.status_code} in {process_time:.3f}s")
        response.headers["X-Process-Time"] = str(process_time)
        return response


limiter = Limiter(key_func=get_remote_address, default_limits=[settings.RATE_LIMIT])

app = FastAPI(
    title="videohub API",
    description=(
        "In-memory backend for a small video sharing service: accounts, uploads, "
        "whole-word title search, threaded comments, likes, subscriptions and "
        "upload notifications."
    ),
    version="1.0.0",
)
app.state.backend = create_backend()
app.state.limiter = limiter


@app.exception_handler(VideoHubError)
async def videohub_error_handler(request: Request, exc: VideoHubError):
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, NotAuthorized) else None
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.kind, "message": str(exc), "type": "videohub_error"},
        headers=headers,
    )


app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

app.add_middleware(SlowAPIMiddleware)
app.add_middleware(LoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

# Prometheus metrics
Instrumentator().instrument(app).expose(app, endpoint="/metrics")

app.include_router(auth_router, prefix='/api/auth')
app.include_router(videos_router, prefix='/api/videos')
app.include_router(social_router, prefix='/api/social')
app.include_router(users_router, prefix='/api/users')


@app.get("/healthChecker")
def read_api_health():
    return {"status": "ok"}
