"""Run the parking lot API server with ``python -m parking_lot``."""

import uvicorn

from .config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run("parking_lot.app:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
