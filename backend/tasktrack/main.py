from datetime import timedelta
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import Settings, get_settings
from .databases.database import Base, build_engine, build_session_factory
from .errors import register_exception_handlers
from .logging_setup import setup_logging
from .models import task as _task_model  # noqa: F401  registers the tasks table
from .models import user as _user_model  # noqa: F401  registers the users table
from .routes import auth, tasks
from .utils.sessions import SessionStore
from .utils.tokens import TokenIssuer


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(settings.log_level)

    engine = build_engine(settings.database_url)
    Base.metadata.create_all(bind=engine)

    app = FastAPI(title="Todo List API")
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    app.state.token_issuer = TokenIssuer(
        settings.jwt_secret,
        SessionStore(),
        algorithm=settings.jwt_algorithm,
        access_ttl=timedelta(minutes=settings.access_token_ttl_minutes),
        refresh_ttl=timedelta(days=settings.refresh_token_ttl_days),
    )

    register_exception_handlers(app)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(tasks.router)
    app.include_router(auth.router)

    @app.get("/", summary="API status")
    def read_root():
        return {"message": "Todo List API"}

    return app


app = create_app()
