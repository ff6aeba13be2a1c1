"""FastAPI application entry point."""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from api.routes import counting, game
from api.schemas import SessionResponse
from api.session import create_session
from config import config
from core.errors import InvalidAction, InvalidCountEntry, ShoeExhausted

logging.basicConfig(
    level=config.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

# Initialize rate limiter
limiter = Limiter(
    key_func=get_remote_address,
    enabled=config.rate_limit.enabled,
    default_limits=[f"{config.rate_limit.requests_per_minute}/minute"],
)


def _rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Handle rate limit exceeded errors."""
    return JSONResponse(
        status_code=429,
        content={"detail": f"Rate limit exceeded: {exc.detail}"},
    )


def _invalid_input_handler(request: Request, exc: Exception) -> JSONResponse:
    """Rejected actions and count entries leave the session untouched."""
    content = {"detail": str(exc)}
    action = getattr(exc, "action", None)
    if action is not None:
        content["action"] = action
    return JSONResponse(status_code=400, content=content)


def _shoe_exhausted_handler(request: Request, exc: ShoeExhausted) -> JSONResponse:
    return JSONResponse(status_code=409, content={"detail": str(exc)})


app = FastAPI(
    title="Blackjack Shoe Trainer",
    description="Basic strategy and Hi-Lo card counting trainer API",
    version="0.1.0",
)

# Add rate limiter to app state and exception handlers
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_exception_handler(InvalidAction, _invalid_input_handler)
app.add_exception_handler(InvalidCountEntry, _invalid_input_handler)
app.add_exception_handler(ShoeExhausted, _shoe_exhausted_handler)

# CORS middleware with configurable origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors.allowed_origins,
    allow_credentials=config.cors.allow_credentials,
    allow_methods=config.cors.allow_methods,
    allow_headers=config.cors.allow_headers,
)


@app.get("/api/health")
@limiter.limit(f"{config.rate_limit.requests_per_minute}/minute")
async def health_check(request: Request) -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy"}


@app.post("/api/session")
@limiter.limit(f"{config.rate_limit.requests_per_minute}/minute")
async def new_session(request: Request) -> SessionResponse:
    """Create a session holding a trainer and a shoe tracker."""
    return SessionResponse(session_id=await create_session())


# Include routers
app.include_router(game.router, prefix="/api/game", tags=["game"])
app.include_router(counting.count_router, prefix="/api/count", tags=["count"])
app.include_router(counting.counter_router, prefix="/api/counter", tags=["counter"])


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "api.main:app",
        host=config.host,
        port=config.port,
        reload=config.debug,
        log_level=config.log_level.lower(),
    )
