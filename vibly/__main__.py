"""Module executed when running ``python -m vibly``."""

from __future__ import annotations

import uvicorn

from app.config import settings


def main() -> None:
    """Serve the profiling API on the configured host and port."""

    development = settings.environment == "development"
    uvicorn.run(
        "app.main:app",
        host=settings.server_host,
        port=settings.server_port,
        reload=development,
        log_level="debug" if development else "info",
    )


if __name__ == "__main__":  # pragma: no cover - runtime entrypoint
    main()
