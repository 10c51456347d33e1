"""FastAPI application for the script transform engine."""
from __future__ import annotations

from fastapi import FastAPI

from script_engines.script_transform.routes import router


def create_app() -> FastAPI:
    app = FastAPI(title="Script Transform Engine", version="0.1.0")

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok"}

    app.include_router(router)
    return app


app = create_app()
