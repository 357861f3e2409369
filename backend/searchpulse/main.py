import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from searchpulse.routers import health, movies, metrics
from searchpulse.core.cache import CacheService
from searchpulse.core.config import get_settings
from searchpulse.core.exceptions import BaseAppException
from searchpulse.core.supabase_client import create_supabase_client
from searchpulse.core.tmdb_service import TMDBServiceFactory
from searchpulse.db import Base, engine
from searchpulse import models  # ensure models are imported

settings = get_settings()
logging.basicConfig(level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Clients live exactly as long as the application
    cache = CacheService(settings.REDIS_URL)
    tmdb_movie_service = TMDBServiceFactory.create_from_settings(settings, cache=cache)
    app.state.settings = settings
    app.state.cache = cache
    app.state.supabase = create_supabase_client(settings.SUPABASE_URL, settings.SUPABASE_ANON_KEY)
    app.state.tmdb_movie_service = tmdb_movie_service

    if settings.AUTO_CREATE_TABLES:
        Base.metadata.create_all(bind=engine)

    logger.info(f"SearchPulse started (metrics backend: {settings.METRICS_BACKEND}, "
                f"atomic upsert: {settings.METRICS_ATOMIC_UPSERT})")
    try:
        yield
    finally:
        tmdb_movie_service.client.close()
        cache.redis.close()

app = FastAPI(
    title="SearchPulse API",
    description="Movie search with search popularity metrics",
    version="1.0.0",
    lifespan=lifespan,
)

origins_env = settings.CORS_ALLOW_ORIGINS or ""
origins = [o.strip() for o in origins_env.split(",") if o.strip()] or [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)

@app.exception_handler(BaseAppException)
async def app_exception_handler(request: Request, exc: BaseAppException):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})

app.include_router(health.router)
app.include_router(movies.router)
app.include_router(metrics.router)
