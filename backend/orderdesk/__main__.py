"""Run the API under uvicorn: `python -m orderdesk` or the `orderdesk` script."""

import uvicorn

from orderdesk.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "orderdesk.main:app",
        host=settings.host,
        port=settings.port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
