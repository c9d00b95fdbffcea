"""HTTP surface for the extraction engine.

``create_app`` wires one route for summarising a link (``POST /scrape``)
and a ``GET /health`` check for process supervisors.
"""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from linkcard.api.routers import scrape as scrape_router


def create_app() -> FastAPI:
    """Build the app with CORS middleware and every route attached."""
    app = FastAPI(
        title="linkcard API",
        description=(
            "Fetches a public web page and summarises it as a project card: "
            "title, description, preview image, favicon and a best-effort "
            "list of the technologies the site was built with."
        ),
        version="0.1.0",
    )

    # The card editor runs on other origins; the API is read-only.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(scrape_router.router, prefix="/scrape", tags=["scrape"])

    @app.get("/health", tags=["health"])
    def health() -> dict[str, str]:
        return {"status": "ok"}

    return app


# ASGI entry point, e.g. `uvicorn linkcard.api.app:app`
app = create_app()
