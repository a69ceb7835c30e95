# app/main.py
from __future__ import annotations

import logging
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from fastapi.routing import APIRoute

from app.errors import ComparisonError
from app.routes.compare import get_settings, router as compare_router

logger = logging.getLogger("trade-comparison")
logging.basicConfig(level=logging.INFO)

# --- keep operation_id stable (avoid FastAPI auto-dedupe renaming) ----------
def _fixed_unique_id(route: APIRoute) -> str:
    return route.operation_id or f"{route.name}_{route.path}".strip("/").replace("/", "_")

app = FastAPI(
    title="Trade Comparison API",
    description="Compare Trading Economics indicators between two countries",
    version="2026.10.17",
    generate_unique_id_function=_fixed_unique_id,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(get_settings().cors_origins),
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ComparisonError)
def comparison_error_handler(request: Request, exc: ComparisonError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail()})


app.include_router(compare_router)
logger.info("[init] compare router mounted")


@app.get("/", response_class=PlainTextResponse)
def root():
    return "Server is running!"


@app.get("/healthz")
def healthz():
    # keep this super fast
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=get_settings().port)
