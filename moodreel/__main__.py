"""Entry point. Allows ``python -m moodreel``."""

import uvicorn

from moodreel.settings import settings


def main() -> None:
    """Serve the API with uvicorn."""
    uvicorn.run(
        "moodreel.api.main:app",
        host=settings.api.host,
        port=settings.api.port,
        reload=settings.api.reload,
    )


if __name__ == "__main__":
    main()
