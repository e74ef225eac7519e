"""Run the API with uvicorn on the configured host and port (HOST / PORT)."""

import uvicorn

from cloudnote.config import settings


def main() -> None:
    uvicorn.run(
        "cloudnote.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
