from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import logging

from clinic_api.config.settings import settings
from clinic_api.core.errors import register_exception_handlers
from clinic_api.db.base import create_schema, get_engine, get_session_factory
from clinic_api.routes.auth.router import router as auth_router
from clinic_api.routes.patients.router import router as patients_router

# -------------------------------------------------------------------------------------
# Logging
# -------------------------------------------------------------------------------------
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application start-up & shutdown hooks."""
    logger.info("Application startup …")

    engine = await get_engine(settings.database_url)
    try:
        app.state.engine = engine
        app.state.session_factory = await get_session_factory(engine)
        if settings.create_tables:
            await create_schema(engine)
            logger.info("Database schema ensured.")
    except Exception:
        logger.critical("CRITICAL ERROR DURING STARTUP INITIALIZATIONS", exc_info=True)
        await engine.dispose()
        raise

    if not settings.secret_key:
        # requests that need a token will answer 500 until this is fixed
        logger.error("SECRET_KEY is not defined. Please check your environment.")

    yield

    logger.info("Application shutdown …")
    await engine.dispose()
    logger.info("Shutdown complete")


# -------------------------------------------------------------------------------------
# FastAPI application instance
# -------------------------------------------------------------------------------------
app = FastAPI(title="Clinic Records API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[str(o) for o in settings.cors_origins],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)


@app.get("/")
async def root():
    return {"msg": "Clinic Records API is running..."}


@app.get("/health")
async def health_check():
    return {"status": "ok"}


app.include_router(auth_router, prefix=settings.api_prefix)
app.include_router(patients_router, prefix=settings.api_prefix)
