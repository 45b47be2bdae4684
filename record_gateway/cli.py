"""Console entry point — serves the gateway with uvicorn."""

import uvicorn

from record_gateway.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "record_gateway.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
