from __future__ import annotations

import logging
import os
import time
import uuid
from pathlib import Path

from dotenv import load_dotenv

# Load .env from backend directory so ALLOWED_ORIGINS etc. are available
load_dotenv(Path(__file__).resolve().parent / ".env")

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse, Response
from starlette.middleware.base import BaseHTTPMiddleware

from reporting.errors import ExportFailure, ReportValidationError
from reporting.print_engine import PlaywrightPrintEngine, PrintEngine
from reporting.report_builder import build_report_html, build_report_pdf

# Version for /health (Render sets RENDER_GIT_COMMIT)
VERSION = (os.environ.get("RENDER_GIT_COMMIT") or "").strip() or "unknown"

# Same logger as uvicorn so all lines land in one stream
_LOG = logging.getLogger("uvicorn.error")

app = FastAPI(title="Report Renderer", version="0.1.0")

# CORS: use ALLOWED_ORIGINS env (comma-separated) if set, else local dev origins
_origins_env = os.environ.get("ALLOWED_ORIGINS", "").strip()
if _origins_env:
    ALLOWED_ORIGINS = [o.strip() for o in _origins_env.split(",") if o.strip()]
else:
    ALLOWED_ORIGINS = [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://localhost:8080",
        "http://127.0.0.1:5500",
    ]
app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)


class RequestLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        request_id = str(uuid.uuid4())[:8]
        request.state.request_id = request_id
        start = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start) * 1000
        _LOG.info(
            "request_id=%s method=%s path=%s status=%s duration_ms=%.0f",
            request_id,
            request.method,
            request.url.path,
            response.status_code,
            duration_ms,
        )
        response.headers["X-Request-Id"] = request_id
        return response


app.add_middleware(RequestLogMiddleware)


@app.on_event("startup")
def startup_log() -> None:
    port = os.environ.get("PORT", "5000")
    host = os.environ.get("HOST", "127.0.0.1")
    _LOG.info("Renderer starting on http://%s:%s version=%s", host, port, VERSION)


def get_print_engine() -> PrintEngine:
    """Fresh engine per request; Playwright browsers are not shared."""
    return PlaywrightPrintEngine()


def _invalid_payload(e: ReportValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": "Invalid payload", "issues": e.issues})


async def _json_body(request: Request):
    try:
        return await request.json()
    except Exception as e:
        raise ReportValidationError(
            [{"path": "", "message": f"Body is not valid JSON: {str(e)[:200]}", "type": "json_invalid"}]
        ) from e


@app.get("/")
@app.get("/health")
def health():
    return {"status": "ok", "version": VERSION}


@app.get("/health/pdf")
def health_pdf():
    """
    Runtime check for Playwright PDF dependencies.
    Returns 200 only when Chromium can launch successfully.
    """
    try:
        from playwright.sync_api import sync_playwright
    except ImportError:
        raise HTTPException(status_code=503, detail="Playwright is not installed.")

    try:
        with sync_playwright() as p:
            browser = p.chromium.launch(args=["--no-sandbox"])
            try:
                page = browser.new_page()
                page.set_content("<html><body>ok</body></html>")
            finally:
                browser.close()
    except Exception as e:
        msg = str(e)
        if len(msg) > 500:
            msg = msg[:500]
        raise HTTPException(
            status_code=503,
            detail=f"Playwright runtime unavailable: {msg}",
        ) from e

    return {"status": "ok", "pdf_runtime": "ready"}


@app.post("/render", response_class=HTMLResponse)
async def render_preview(request: Request):
    """Live-preview HTML for a report payload. 400 with every violated path when invalid."""
    try:
        html_str = build_report_html(await _json_body(request))
    except ReportValidationError as e:
        return _invalid_payload(e)
    return HTMLResponse(html_str, media_type="text/html; charset=utf-8")


@app.post("/render.pdf")
async def render_pdf(request: Request, engine: PrintEngine = Depends(get_print_engine)):
    """
    Paginated PDF for a report payload.
    400 on invalid payload (print engine never launched), 500 when the engine fails.
    """
    rid = getattr(request.state, "request_id", "no-rid")
    try:
        export = await build_report_pdf(await _json_body(request), engine=engine)
    except ReportValidationError as e:
        _LOG.info("RENDER_PDF_INVALID rid=%s paths=%s", rid, e.paths[:10])
        return _invalid_payload(e)
    except ExportFailure as e:
        _LOG.error("RENDER_PDF_ERR rid=%s err=%s", rid, e.detail[:400])
        return JSONResponse(status_code=500, content={"error": "PDF render failed", "detail": e.detail})

    _LOG.info("RENDER_PDF_DONE rid=%s bytes=%d", rid, len(export.content))
    return Response(
        content=export.content,
        media_type="application/pdf",
        headers={
            "Content-Disposition": export.content_disposition,
            "Content-Length": str(len(export.content)),
        },
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host=os.environ.get("HOST", "127.0.0.1"),
        port=int(os.environ.get("PORT", "5000")),
        reload=True,
    )
