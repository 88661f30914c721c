"""Run the gateway with ``python -m docgen`` or the ``docgen-gateway`` script."""

from __future__ import annotations

import uvicorn

from .core.settings import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "docgen.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.environment == "development",
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
