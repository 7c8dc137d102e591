import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.api import notes, summary
from app.config import Settings, settings
from app.database import build_engine, build_session_factory, create_tables
from app.exceptions import register_exception_handlers
from app.log_config import setup_logging
from app.middleware import add_middlewares
from app.security import KeyRegistry, derive_tenant_id
from app.services.summary import Summarizer, build_summarizer

logger = logging.getLogger("burnnote.startup")

_UNSET = object()


def create_app(config: Settings | None = None, summarizer: Summarizer | None | object = _UNSET) -> FastAPI:
    config = config or settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        engine = build_engine(config)
        if engine is None:
            logger.warning("no database configured; storage routes will answer 500")
            app.state.session_factory = None
        else:
            legacy_owner = derive_tenant_id(config.ADMIN_KEY) if config.ADMIN_KEY.strip() else None
            await create_tables(engine, isolate=config.TENANT_ISOLATION, legacy_owner=legacy_owner)
            app.state.session_factory = build_session_factory(engine)
        if not len(app.state.key_registry):
            logger.warning("no admin keys configured; every authenticated request will be rejected")
        yield
        if engine is not None:
            await engine.dispose()

    app = FastAPI(title="Burnnote", lifespan=lifespan)
    app.state.config = config
    app.state.key_registry = KeyRegistry.from_settings(config)
    app.state.summarizer = build_summarizer(config) if summarizer is _UNSET else summarizer
    app.state.session_factory = None

    add_middlewares(app)
    register_exception_handlers(app)

    # 注册路由
    app.include_router(notes.router, prefix="/api", tags=["笔记"])
    app.include_router(summary.router, prefix="/api", tags=["摘要"])

    @app.get("/")
    async def root():
        return {"message": "Burnnote note service"}

    return app


setup_logging(settings.LOG_LEVEL)
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host=settings.HOST, port=settings.PORT)
