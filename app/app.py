"""
FastAPI application — server-side proxy for the Rebrickable alternates API.

Run as a script:
    python app/app.py

Or as a module:
    uvicorn app.app:app --reload

The Rebrickable API key is read once from REBRICKABLE_API_KEY (a .env file
is honoured) and injected into create_app(); it is attached to outbound
requests only and never returned to the client.

Endpoints:
    GET /api/rebrickable-proxy?set_num=<str>
        200 → upstream JSON relayed byte-for-byte ({count, next, previous, results})
        400 → {"error": "Set number is required"}
        500 → {"error": "..."}  (missing API key or unexpected failure)
        <upstream status> → {"error": "...", "details": <upstream body>}
    GET /health
        returns: {"status": "ok", "api_key_configured": bool}

Logs each query and wall-clock response time to stdout and logs/app.log
(rotating, 5 MB max, 3 backups).
"""

import asyncio
import logging
import logging.handlers
import os
import sys
import time
from pathlib import Path

import requests
import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.responses import JSONResponse, Response

# Ensure project root is on sys.path when running as a script (python app/app.py)
sys.path.insert(0, str(Path(__file__).parent.parent))

from rebrickable.alternates import fetch_alternates, normalize_set_num

load_dotenv()

LOG_DIR  = Path(__file__).parent.parent / "logs"
LOG_FILE = LOG_DIR / "app.log"

PROXY_PATH = "/api/rebrickable-proxy"

def _setup_logging() -> None:
    LOG_DIR.mkdir(exist_ok=True)
    fmt = logging.Formatter("%(asctime)s  %(levelname)s  %(message)s")

    stream = logging.StreamHandler(sys.stdout)
    stream.setFormatter(fmt)

    # Rotate at 5 MB, keep 3 backups
    rotating = logging.handlers.RotatingFileHandler(
        LOG_FILE, maxBytes=5 * 1024 * 1024, backupCount=3, encoding="utf-8"
    )
    rotating.setFormatter(fmt)

    root = logging.getLogger()
    root.setLevel(logging.INFO)
    root.addHandler(stream)
    root.addHandler(rotating)

_setup_logging()
log = logging.getLogger("api")


# ---------------------------------------------------------------------------
# Error payloads
# ---------------------------------------------------------------------------

MSG_SET_NUM_REQUIRED = "Set number is required"
MSG_API_KEY_MISSING  = "Internal server error: API key missing"
MSG_INTERNAL_ERROR   = "Internal server error"


def _error(status_code: int, message: str, details: str | None = None) -> JSONResponse:
    payload = {"error": message}
    if details is not None:
        payload["details"] = details
    return JSONResponse(status_code=status_code, content=payload)


# ---------------------------------------------------------------------------
# App factory
# ---------------------------------------------------------------------------

def create_app(api_key: str | None, session: requests.Session | None = None) -> FastAPI:
    """
    Build the proxy app around an explicit credential.

    api_key: Rebrickable key; None or "" makes every proxy call a 500.
    session: optional requests.Session for outbound calls (tests pass a stub).
    """
    app = FastAPI(title="MOC Finder")

    if not api_key:
        log.warning("REBRICKABLE_API_KEY is not set; proxy requests will fail with 500.")

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok", "api_key_configured": bool(api_key)}

    @app.get(PROXY_PATH)
    def rebrickable_proxy(set_num: str | None = None) -> Response:
        if not set_num or not set_num.strip():
            log.info("Rejected request: empty set_num")
            return _error(400, MSG_SET_NUM_REQUIRED)

        if not api_key:
            log.error("Rebrickable API key missing, check REBRICKABLE_API_KEY.")
            return _error(500, MSG_API_KEY_MISSING)

        t0 = time.perf_counter()
        lookup = normalize_set_num(set_num)

        try:
            upstream = fetch_alternates(lookup, api_key, session=session)

            if not upstream.ok:
                body = upstream.text
                log.error(
                    "Rebrickable error for set_num=%r: %d %s  body=%r",
                    lookup, upstream.status_code, upstream.reason, body,
                )
                return _error(
                    upstream.status_code,
                    f"Error fetching data from Rebrickable: {upstream.reason or ''}",
                    details=body,
                )

            data = upstream.json()  # raises on a malformed body

        except Exception as exc:
            log.exception("Proxy failure for set_num=%r", lookup)
            return _error(500, str(exc) or MSG_INTERNAL_ERROR)

        elapsed = time.perf_counter() - t0
        count = data.get("count") if isinstance(data, dict) else None
        log.info("set_num=%r  count=%s  %.2fs", lookup, count, elapsed)

        # Relay the upstream bytes untouched
        return Response(content=upstream.content, status_code=200, media_type="application/json")

    return app


app = create_app(os.getenv("REBRICKABLE_API_KEY"))


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def _launch_server() -> None:
    config = uvicorn.Config(app, host="0.0.0.0", port=8000, reload=False)
    server = uvicorn.Server(config)

    try:
        asyncio.get_running_loop()
    except RuntimeError:
        uvicorn.run(app, host="0.0.0.0", port=8000, reload=False)
        return

    log.warning(
        "Detected an existing asyncio event loop; serving with create_task() instead of asyncio.run()."
    )
    asyncio.create_task(server.serve())


if __name__ == "__main__":
    log.info("=== MOC Finder proxy — launching server on http://0.0.0.0:8000 ===")
    _launch_server()
