"""FastAPI application exposing the Fleetbook endpoints."""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from . import api, database
from .config import get_settings
from .log import configure_logging

LOG = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    settings = get_settings()
    configure_logging(json_format=settings.json_logs, level=settings.log_level)
    database.init_db()
    LOG.info("Fleetbook backend ready")
    yield


app = FastAPI(title="Fleetbook Expense Backend", version="1.0.0", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=list(get_settings().cors_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(api.router)


@app.exception_handler(SQLAlchemyError)
async def datastore_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    LOG.error("Datastore error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Datastore operation failed"},
    )


@app.get("/health", tags=["system"])
def healthcheck() -> dict[str, str]:
    return {"status": "ok", "timestamp": datetime.now(UTC).isoformat()}


def main() -> None:
    """Entrypoint for running the development server."""
    import uvicorn

    uvicorn.run("fleetbook.server:app", host="127.0.0.1", port=8000, reload=False)


if __name__ == "__main__":
    main()
