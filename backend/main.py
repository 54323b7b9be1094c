from contextlib import asynccontextmanager
import json
import logging
import os

from fastapi import APIRouter, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from starlette.concurrency import run_in_threadpool

from blockfreelance import config
from blockfreelance.errors import InvalidInput, StoreError
from blockfreelance.project_store import ProjectStore
from blockfreelance.static_files import send_file, serve_static

logging.basicConfig(level=config.LOG_LEVEL, format="[%(name)s] %(levelname)s %(message)s")
logger = logging.getLogger("server")

CORS_METHODS = ["GET", "POST", "DELETE", "OPTIONS"]
CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": ",".join(CORS_METHODS),
    "Access-Control-Allow-Headers": "Content-Type",
}


class PreflightCORSMiddleware(CORSMiddleware):
    """CORSMiddleware that answers accepted preflights with 204 No Content."""

    def preflight_response(self, request_headers):
        response = super().preflight_response(request_headers)
        if response.status_code != 200:
            return response
        headers = {
            k: v for k, v in response.headers.items()
            if k not in ("content-length", "content-type")
        }
        return Response(status_code=204, headers=headers)


def _error(status_code, message, headers=None):
    return JSONResponse({"ok": False, "error": message}, status_code=status_code, headers=headers)


def get_store(request: Request) -> ProjectStore:
    return request.app.state.store


router = APIRouter()

# --- ENDPOINTS ---

@router.get("/")
@router.get("/index.html")
def read_index(request: Request):
    entry = os.path.join(request.app.state.public_dir, config.ENTRY_FILENAME)
    if os.path.isfile(entry):
        return send_file(entry)
    return PlainTextResponse(
        f"Place {config.ENTRY_FILENAME} in this folder and open /{config.ENTRY_FILENAME}"
    )


@router.options("/api/{rest:path}")
def api_preflight(rest: str):
    return Response(status_code=204, headers=CORS_HEADERS)


@router.get("/api/projects")
def list_projects(request: Request):
    return {"ok": True, "projects": get_store(request).read_all()}


@router.post("/api/projects", status_code=201)
async def create_project(request: Request):
    declared = request.headers.get("content-length")
    if declared and declared.isdigit() and int(declared) > config.MAX_BODY_BYTES:
        return _error(413, "Payload too large")

    body = b""
    async for chunk in request.stream():
        body += chunk
        if len(body) > config.MAX_BODY_BYTES:
            return _error(413, "Payload too large")

    try:
        payload = json.loads(body) if body else None
    except ValueError as e:
        raise InvalidInput("Malformed JSON") from e

    project = await run_in_threadpool(get_store(request).create, payload)
    return {"ok": True, "project": project}


@router.delete("/api/projects/{project_id}")
def delete_project(project_id: str, request: Request):
    deleted = get_store(request).delete(project_id)
    return {"ok": True, "id": deleted}


@router.post("/api/reset")
def reset_projects(request: Request):
    get_store(request).reset()
    return {"ok": True, "message": "Reset to sample projects"}


@router.api_route("/api/{rest:path}", methods=["GET", "POST", "PUT", "PATCH", "DELETE"])
def api_not_found(rest: str):
    return _error(404, "API route not found")


@router.get("/{file_path:path}")
def read_static(file_path: str, request: Request):
    return serve_static(request.app.state.public_dir, file_path)


def create_app(public_dir=None):
    public_dir = os.path.abspath(public_dir or config.PUBLIC_DIR)
    store = ProjectStore(
        os.path.join(public_dir, config.DATA_FILENAME),
        os.path.join(public_dir, config.LEGACY_FILENAME),
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        store.ensure_initialized()
        yield

    # No docs routes: every unmatched GET belongs to the static root
    app = FastAPI(
        title="BlockFreelance",
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.public_dir = public_dir
    app.state.store = store

    app.add_middleware(
        PreflightCORSMiddleware,
        allow_origins=["*"],
        allow_methods=CORS_METHODS,
        allow_headers=["Content-Type"],
    )

    @app.exception_handler(StoreError)
    async def store_error_handler(request: Request, exc: StoreError):
        logger.warning("%s %s failed: %s", request.method, request.url.path, exc.message)
        return _error(exc.status_code, exc.message)

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        logger.error("%s %s crashed", request.method, request.url.path, exc_info=exc)
        if request.url.path.startswith("/api/"):
            # Runs outside the CORS middleware, so the headers are added here
            return _error(500, "Server error", headers=CORS_HEADERS)
        return PlainTextResponse("Server error", status_code=500)

    app.include_router(router)
    return app


app = create_app()


def run():
    import uvicorn

    logger.info("Server running at http://%s:%s/", config.HOST, config.PORT)
    logger.info("Open: http://localhost:%s/%s", config.PORT, config.ENTRY_FILENAME)
    uvicorn.run(app, host=config.HOST, port=config.PORT)


if __name__ == "__main__":
    run()
