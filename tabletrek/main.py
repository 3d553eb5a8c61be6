"""TableTrek - FastAPI app entry point."""
import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from tabletrek.core.config import Settings, get_settings
from tabletrek.core.errors import TableTrekError
from tabletrek.db.base import Base
from tabletrek.db.session import create_engine, create_session_factory
from tabletrek.routers import api, auth
from tabletrek.services.seeding import seed_achievements

logger = logging.getLogger("tabletrek")


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # one engine per process, handed to handlers through app.state
        engine = create_engine(settings)
        app.state.session_factory = create_session_factory(engine)

        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

        if settings.seed_achievements:
            await seed_achievements(app.state.session_factory)

        yield
        await engine.dispose()

    app = FastAPI(
        title=settings.app_name,
        description="Maths quiz backend: profiles, coins and achievements",
        debug=settings.debug,
        lifespan=lifespan,
    )
    app.state.settings = settings

    @app.exception_handler(TableTrekError)
    async def tabletrek_error_handler(request: Request, exc: TableTrekError):
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})

    @app.middleware("http")
    async def log_api_requests(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        if request.url.path.startswith("/api"):
            duration_ms = (time.perf_counter() - start) * 1000
            logger.info("%s %s %s in %.0fms", request.method, request.url.path, response.status_code, duration_ms)
        return response

    app.include_router(auth.router)
    app.include_router(api.router)

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    return app


app = create_app()
