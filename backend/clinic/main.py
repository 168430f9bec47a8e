from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from typing import Optional
import logging

from sqlalchemy import text

from clinic.config.settings import Settings, settings as default_settings
from clinic.core.exception_handlers import register_exception_handlers
from clinic.core.middleware import request_logging_middleware
from clinic.db.base import Base, get_engine, get_session_factory
import clinic.db.models  # noqa: F401  (registers tables on Base.metadata)
from clinic.services.mutation import MutationService
from clinic.services.query import QueryService

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application start-up & shutdown hooks."""
    # ------------------------------------------------------------------ start-up -----
    logger.info("Application startup …")
    settings: Settings = app.state.settings

    engine = None
    try:
        logger.info("Initializing Database Engine...")
        engine = await get_engine(settings.database_url, echo=settings.sql_echo)
        app.state.engine = engine

        if settings.auto_create_tables:
            async with engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
            logger.info("Database tables created (auto_create_tables)")

        session_factory = await get_session_factory(engine)
        app.state.session_factory = session_factory

        # one instance each for the life of the process
        app.state.query_service = QueryService(session_factory)
        app.state.mutation_service = MutationService(session_factory)
        logger.info("Query and mutation services ready.")
    except Exception as e:
        logger.critical(f"CRITICAL ERROR DURING STARTUP INITIALIZATIONS: {e}", exc_info=True)
        if engine:
            await engine.dispose()
            logger.info("Disposed engine after startup failure.")
        raise

    # ------------------------------------------------ give control back
    yield

    # ------------------------------------------------ shutdown --------
    logger.info("Application shutdown …")
    await engine.dispose()
    logger.info("DB engine disposed")


def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    app_settings = app_settings or default_settings
    configure_logging(app_settings.log_level)

    app = FastAPI(title="Mini Clinic", lifespan=lifespan)
    app.state.settings = app_settings

    # CORS -------------------------------------------------------------------------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[str(o) for o in app_settings.cors_origins],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.middleware("http")(request_logging_middleware)
    register_exception_handlers(app)

    # ------------------------------------------------------------- health-check -----
    @app.get("/health")
    async def health_check(request: Request):
        database = "ok"
        try:
            async with request.app.state.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except Exception:
            logger.exception("Health check: database unreachable")
            database = "unreachable"
        return {"status": "ok" if database == "ok" else "degraded", "database": database}

    # --------------------------------------------------------------- routes ---------
    from clinic.routes.patient.router import router as patient_router
    from clinic.routes.appointment.router import router as appointment_router
    from clinic.routes.workflow.router import router as workflow_router

    app.include_router(patient_router)
    app.include_router(appointment_router)
    app.include_router(workflow_router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("clinic.main:app", host="0.0.0.0", port=8000)
