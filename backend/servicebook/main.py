import logging
import os
from typing import List, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.trustedhost import TrustedHostMiddleware

from servicebook.routers import bookings, clients, providers


def _setup_logging(level: str) -> None:
    root = logging.getLogger()
    if root.handlers:
        return
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter(fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s", datefmt="%Y-%m-%d %H:%M:%S")
    )
    root.addHandler(handler)


def _env_list(name: str) -> Optional[List[str]]:
    """Comma separated env value; None when unset or ``*``."""
    values = [part.strip() for part in os.getenv(name, "*").split(",") if part.strip()]
    if not values or values == ["*"]:
        return None
    return values


def create_app() -> FastAPI:
    _setup_logging(os.getenv("LOG_LEVEL", "INFO"))
    app = FastAPI(title="ServiceBook API", version="0.1.0")

    origins = _env_list("CORS_ORIGINS")
    # Credentials are only allowed with an explicit origin list.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins or ["*"],
        allow_credentials=origins is not None,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    hosts = _env_list("TRUSTED_HOSTS")
    if hosts is not None:
        app.add_middleware(TrustedHostMiddleware, allowed_hosts=hosts)

    for module in (providers, clients, bookings):
        app.include_router(module.router)

    @app.get("/health")
    def health():
        return {"status": "ok"}

    return app


app = create_app()
