"""Framework-free request dispatch.

``handle_request`` maps a method and URL path to a :class:`Response` the
hosting web framework can send as is:

* ``/``             -> HTML landing page
* ``/robo/<input>`` -> robot avatar PNG for ``<input>``
* anything else     -> plain identicon PNG for the whole path

Only ``GET``, ``HEAD`` and ``OPTIONS`` are served. PNG responses are marked
immutable with the input as ETag, since the path fully determines the image.

Hosts build one :class:`AvatarService` with :func:`create_service` at start-up;
the atlas is loaded there, so a bad atlas stops the process before it serves.
"""

from dataclasses import dataclass
from typing import Optional

from pyrsistent import pmap
from pyrsistent.typing import PMap

from robo_avatar.config import AvatarConfig
from robo_avatar.errors import EncodeError
from robo_avatar.generator import AvatarGenerator, create_generator, default_generator
from robo_avatar.identicon import identicon_png
from robo_avatar.log import get_logger

logger = get_logger(__name__)

ALLOWED_METHODS = ("GET", "HEAD", "OPTIONS")
ROBO_PREFIX = "/robo/"


@dataclass(frozen=True)
class Response:
    status: int
    body: bytes
    headers: PMap[str, str] = pmap()

    @property
    def content_type(self) -> Optional[str]:
        return self.headers.get("Content-Type")


def cors_headers() -> PMap[str, str]:
    return pmap(
        {
            "Access-Control-Allow-Origin": "*",
            "Access-Control-Allow-Methods": ", ".join(ALLOWED_METHODS),
        }
    )


def png_response(png: bytes, etag: str, max_age: int) -> Response:
    headers = cors_headers().update(
        {
            "Content-Type": "image/png",
            "Cache-Control": f"public, max-age={max_age}, immutable",
            "ETag": f'"{etag}"',
        }
    )
    return Response(status=200, body=png, headers=headers)


def error_response(status: int, message: str) -> Response:
    return Response(
        status=status,
        body=message.encode("utf-8"),
        headers=pmap({"Content-Type": "text/plain; charset=utf-8"}),
    )


def landing_page() -> Response:
    return Response(
        status=200,
        body=LANDING_HTML.encode("utf-8"),
        headers=pmap({"Content-Type": "text/html; charset=utf-8"}),
    )


def _dispatch(
    method: str,
    path: str,
    generator: AvatarGenerator,
    config: AvatarConfig,
) -> Response:
    if method.upper() not in ALLOWED_METHODS:
        return error_response(405, "Method not allowed")

    if path == "/":
        return landing_page()

    if path.startswith(ROBO_PREFIX):
        text = path[len(ROBO_PREFIX) :]
        if not text:
            return error_response(400, "Missing input parameter")
        avatar = generator.avatar(text)
        return png_response(avatar.png, avatar.etag, config.cache_max_age)

    return png_response(identicon_png(path), path, config.cache_max_age)


def handle_request(
    method: str,
    path: str,
    generator: AvatarGenerator,
    config: AvatarConfig,
) -> Response:
    """Serve one request.

    Arguments:
        method: HTTP method name.
        path: URL path, already separated from the query string.
        generator: Robot generator with its atlas already loaded.
        config: Settings for response headers.

    Returns:
        Response: 200 with PNG or HTML, 400 for ``/robo/`` without input, 405
        for other methods, 500 when encoding fails.
    """
    try:
        response = _dispatch(method, path, generator, config)
    except EncodeError as e:
        logger.error("%s %s failed: %s", method, path, e)
        response = error_response(500, "Avatar generation failed")
    logger.info("%s %s %d", method, path, response.status)
    return response


@dataclass(frozen=True)
class AvatarService:
    """A ready-to-serve generator and its settings."""

    generator: AvatarGenerator
    config: AvatarConfig

    def handle(self, method: str, path: str) -> Response:
        return handle_request(method, path, self.generator, self.config)


def create_service(config: Optional[AvatarConfig] = None) -> AvatarService:
    """Build the service and load its atlas before any request is served.

    Without ``config`` the settings come from the environment and the
    process-wide :func:`default_generator` is used.

    Raises:
        AtlasError: The atlas is missing, unreadable or too small. Hosts let
            this end the process instead of serving without robots.
    """
    if config is None:
        config = AvatarConfig.from_env()
        generator = default_generator()
    else:
        generator = create_generator(config)
    logger.info("Avatar service ready (atlas %dx%d)", *generator.atlas.size)
    return AvatarService(generator=generator, config=config)


LANDING_HTML = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Identicon Generator</title>
    <style>
        body {
            font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
            max-width: 600px;
            margin: 50px auto;
            padding: 20px;
            line-height: 1.6;
        }
        code { background: #f4f4f4; padding: 2px 6px; border-radius: 4px; }
        .example { display: flex; align-items: center; gap: 16px; margin: 20px 0; }
        .example img { border-radius: 8px; box-shadow: 0 2px 8px rgba(0,0,0,0.1); }
        hr { margin: 40px 0; border: none; border-top: 1px solid #eee; }
    </style>
</head>
<body>
    <h1>Identicon Generator</h1>
    <p>Append any string to the URL path to get its identicon as a PNG.</p>
    <p>Request: <code>GET /{your-string}</code></p>
    <div class="example">
        <img src="/hello" alt="hello identicon" width="64" height="64">
        <code>/hello</code>
    </div>
    <div class="example">
        <img src="/user@example.com" alt="email identicon" width="64" height="64">
        <code>/user@example.com</code>
    </div>

    <hr>

    <h1>Robot Avatars</h1>
    <p>Use the <code>/robo/</code> prefix for a 300x300 robot avatar.</p>
    <p>Request: <code>GET /robo/{your-string}</code></p>
    <div class="example">
        <img src="/robo/hello" alt="hello robot" width="100" height="100">
        <code>/robo/hello</code>
    </div>
    <div class="example">
        <img src="/robo/user@example.com" alt="email robot" width="100" height="100">
        <code>/robo/user@example.com</code>
    </div>
</body>
</html>
"""
