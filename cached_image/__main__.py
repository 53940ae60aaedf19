"""Run the image loader service with ``python -m cached_image``."""

from __future__ import annotations

from .app import create_app
from .config import SETTINGS, configure_logging
from .infrastructure.cache import CACHE


def main() -> None:
    app = create_app(cache=CACHE)
    limits = CACHE.stats()
    configure_logging().info(
        "Serving on port %d (cache count limit %d, total cost limit %d, scale %.2f)",
        SETTINGS.port,
        limits["count_limit"],
        limits["total_cost_limit"],
        CACHE.scale,
    )
    app.run(host="0.0.0.0", port=SETTINGS.port, debug=False)


if __name__ == "__main__":
    main()
