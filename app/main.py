"""Main FastAPI application for the task AI suggestion backend."""
from fastapi import FastAPI
import logging

from app.agents.main_agent import create_task_ai_agent
from app.config import get_settings
from app.db.config import engine as db_engine
from app.db.init import init_db
from app.mcp import create_mcp_engine
from app.middleware.cors import add_cors_middleware
from app.routers import ai_router
from app.services.task_repository import TaskRepository
from app.services.user_directory import UserDirectory
from app.utils.logger import configure_logging
from app.utils.metrics import get_metrics_collector

settings = get_settings()
configure_logging(settings.log_level)
logger = logging.getLogger(__name__)

# Create FastAPI application
app = FastAPI(
    title="Task AI Suggestions API",
    description="AI-assisted subtask suggestions, summaries and prioritization over the MCP engine",
    version="1.0.0",
)

# Add CORS middleware
add_cors_middleware(app)


@app.on_event("startup")
async def startup_event():
    """Initialize database and the MCP engine on startup."""
    try:
        init_db(db_engine)
        logger.info("[SUCCESS] Database tables initialized successfully.")
    except Exception as e:
        logger.warning(f"[WARNING] Database initialization failed: {str(e)}")
        logger.warning("[WARNING] Server will continue but database operations may fail.")

    task_repository = TaskRepository(db_engine)
    user_directory = UserDirectory(db_engine)

    mcp_engine = create_mcp_engine(settings, task_repository, user_directory)
    app.state.task_repository = task_repository
    app.state.mcp_engine = mcp_engine
    app.state.task_ai_agent = create_task_ai_agent(mcp_engine, settings.ai_provider)

    logger.info(
        f"[SUCCESS] MCP engine initialized with models: {mcp_engine.available_models()} "
        f"(default: {app.state.task_ai_agent.default_model})"
    )


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": "1.0.0"}


@app.get("/metrics")
async def metrics():
    """In-process counters for MCP runs, provider errors and fallbacks."""
    return get_metrics_collector().get_metrics()


@app.get("/")
async def root():
    """Root endpoint - API welcome message."""
    return {
        "message": "Welcome to the Task AI Suggestions API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/health",
    }


app.include_router(ai_router, prefix="/api")  # AI endpoints: /api/{user_id}/ai/...


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
