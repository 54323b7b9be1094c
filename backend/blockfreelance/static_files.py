import os

from fastapi.responses import FileResponse, PlainTextResponse

MIME_TYPES = {
    ".html": "text/html; charset=utf-8",
    ".js": "application/javascript; charset=utf-8",
    ".css": "text/css; charset=utf-8",
    ".json": "application/json; charset=utf-8",
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".svg": "image/svg+xml",
    ".ico": "image/x-icon",
}
DEFAULT_MIME = "application/octet-stream"


class Forbidden(Exception):
    pass


def guess_mime(path):
    ext = os.path.splitext(path)[1].lower()
    return MIME_TYPES.get(ext, DEFAULT_MIME)


def resolve_path(root, url_path):
    """Map a URL path onto a file path under root.

    Raises Forbidden if the normalized result escapes root.
    """
    root = os.path.abspath(root)
    relative = url_path.lstrip("/")
    target = os.path.normpath(os.path.join(root, relative))
    if target != root and not target.startswith(root + os.sep):
        raise Forbidden(url_path)
    if relative.endswith("/") or relative == "":
        target = os.path.join(target, "index.html")
    return target


def send_file(path):
    if not os.path.isfile(path):
        return PlainTextResponse("Not found", status_code=404)
    return FileResponse(path, media_type=guess_mime(path))


def serve_static(root, url_path):
    try:
        path = resolve_path(root, url_path)
    except Forbidden:
        return PlainTextResponse("Forbidden", status_code=403)
    return send_file(path)
