import structlog
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from wordplay import __version__
from wordplay.api.routes import agent, health

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for FastAPI startup/shutdown events."""
    await logger.ainfo("fastapi.startup", message="WordPlay API starting...")
    yield
    await logger.ainfo("fastapi.shutdown", message="WordPlay API shutting down...")


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""

    app = FastAPI(
        title="WordPlay Agent API",
        description="Autonomous writing assistant: plan, execute, reflect and synthesize",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(agent.router, prefix="/api/v1", tags=["agent"])
    app.include_router(health.router, prefix="/api/v1", tags=["health"])
    app.include_router(health.router, tags=["health"])

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8070)
