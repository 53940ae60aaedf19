from __future__ import annotations

import asyncio

from flask import Flask, jsonify, request

from .config import APP_VERSION, configure_logging
from .controller import Decode, Fetch
from .infrastructure.cache import CACHE, DefaultImageCache
from .infrastructure.responses import send_png
from .state import Failed, Loaded, LoadState
from .view import CachedImageView, default_error_image, default_placeholder

LIMIT_FIELDS = ("count_limit", "total_cost_limit")


def create_app(
    cache: DefaultImageCache = CACHE,
    fetch: Fetch | None = None,
    decode: Decode | None = None,
) -> Flask:
    logger = configure_logging()
    app = Flask(__name__)
    placeholder = default_placeholder()
    error_image = default_error_image()

    async def load_view(url: str | None) -> tuple[LoadState, CachedImageView]:
        view = CachedImageView(
            url,
            placeholder=placeholder,
            error_image=error_image,
            cache=cache,
            fetch=fetch,
            decode=decode,
        )
        try:
            view.on_appear()
            state = await view.controller.wait()
        finally:
            view.dispose()
        return state, view

    @app.route("/image")
    def image():
        url = request.args.get("url") or None
        state, view = asyncio.run(load_view(url))
        headers = {"X-Load-State": type(state).__name__}
        if isinstance(state, Loaded):
            status = 200
        elif isinstance(state, Failed):
            logger.info("Serving error image for %s", url)
            status = 502
        else:
            status = 400
        return send_png(view.render(), status=status, headers=headers)

    @app.route("/cache", methods=["GET", "PATCH", "DELETE"])
    def cache_view():
        if request.method == "GET":
            return jsonify(cache.stats())

        if request.method == "DELETE":
            cache.clear()
            return jsonify(cache.stats())

        payload = request.get_json(silent=True) or {}
        errors: dict[str, str] = {}
        applied: dict[str, int] = {}
        limits = {"count_limit": cache.count_limit, "total_cost_limit": cache.total_cost_limit}

        for name in LIMIT_FIELDS:
            if name not in payload:
                continue
            try:
                coerced = int(payload[name])
            except (TypeError, ValueError):
                errors[name] = "Expected int"
                continue
            if coerced < 0:
                errors[name] = "Expected 0 (unbounded) or a positive int"
                continue
            limits[name] = coerced
            applied[name] = coerced

        if applied:
            cache.configure_limits(limits["count_limit"], limits["total_cost_limit"])

        status = 400 if errors else 200
        return (
            jsonify(updated=applied, errors=errors, cache=cache.stats()),
            status,
        )

    @app.route("/health")
    def health():
        return jsonify(ok=True, version=APP_VERSION, cached=len(cache))

    return app


# Module-level application for WSGI servers (``cached_image.app:app``).
app = create_app()
application = app
