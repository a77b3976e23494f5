"""Beonyeok: Korean/Chinese translation practice with LLM feedback."""
import os
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from log import get_logger
from auth import init_user_db, cleanup_expired_sessions
from cache import cache_stats
from llm import configured_models
from problems import load_problems
import speech

from auth_routes import router as auth_router
from feedback_routes import router as feedback_router
from problem_routes import router as problem_router
from records_routes import router as records_router
from stats_routes import router as stats_router

logger = get_logger("beonyeok.app")

STATIC_DIR = Path(__file__).parent / "static"


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_user_db()
    removed = cleanup_expired_sessions()
    load_problems()
    logger.info("Startup complete", extra={"component": "app", "count": removed})
    yield


def create_app() -> FastAPI:
    app = FastAPI(title="Beonyeok", lifespan=lifespan)
    app.include_router(auth_router)
    app.include_router(feedback_router)
    app.include_router(problem_router)
    app.include_router(records_router)
    app.include_router(stats_router)

    @app.get("/api/health", tags=["System"], summary="Health check")
    async def health_check():
        models = configured_models()
        any_model = any(m["configured"] for m in models)
        return {
            "status": "ok" if any_model else "degraded",
            "models": models,
            "speech": {"available": bool(speech.TTS_URL)},
            "cache": cache_stats(),
            "problems": len(load_problems()),
        }

    if STATIC_DIR.is_dir():
        app.mount("/", StaticFiles(directory=str(STATIC_DIR), html=True), name="static")
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=os.environ.get("BEONYEOK_HOST", "127.0.0.1"),
                port=int(os.environ.get("BEONYEOK_PORT", "8847")))
