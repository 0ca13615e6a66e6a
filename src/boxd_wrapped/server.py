"""FastAPI app serving yearly diary recaps."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx
from fastapi import FastAPI, HTTPException, Query, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import CORS_ALLOW_ORIGINS
from .recap import (
    InvalidUsernameError,
    ProfileNotFoundError,
    UpstreamError,
    build_recap,
)
from .scraper import LetterboxdClient

logger = logging.getLogger(__name__)

app = FastAPI(title="BoxdWrapped API")


def _add_cors(app: FastAPI) -> None:
    """Let browser front-ends call the API."""
    origins = [o.strip() for o in CORS_ALLOW_ORIGINS.split(",") if o.strip()] or ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        # Starlette disallows wildcard origins when credentials are enabled.
        allow_credentials=origins != ["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )


_add_cors(app)


@app.exception_handler(StarletteHTTPException)
async def _error_envelope(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Errors are returned as {"error": message} instead of FastAPI's {"detail": ...}."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.get("/")
def index() -> Dict[str, Any]:
    return {
        "name": "BoxdWrapped API",
        "endpoints": {"recap": "/recap?user=YOUR_USERNAME"},
        "example": "/recap?user=test",
    }


@app.get("/health")
def health() -> Dict[str, str]:
    return {"status": "ok"}


@app.get("/recap")
async def recap(
    user: Optional[str] = None,
    year: Optional[int] = Query(None, ge=1),
) -> Dict[str, Any]:
    if not user:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Missing 'user' parameter"
        )

    try:
        async with LetterboxdClient() as client:
            return await build_recap(client.fetch_page, user, year)
    except InvalidUsernameError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
        ) from exc
    except ProfileNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)
        ) from exc
    except UpstreamError as exc:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)
        ) from exc
    except httpx.HTTPError as exc:
        logger.error(f"Fetch failed for {user}: {type(exc).__name__}: {exc}")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Could not reach Letterboxd: {type(exc).__name__}",
        ) from exc


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="127.0.0.1", port=8000)
