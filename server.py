"""Launch the code runner with uvicorn.

ENV=dev binds to loopback with auto-reload; anything else serves on all
interfaces behind a proxy."""

import os

import uvicorn

from app.core.config import get_settings


def main() -> None:
    settings = get_settings()
    port = int(os.environ.get("PORT", 8000))
    log_level = settings.log_level.lower()

    if os.environ.get("ENV", "dev") == "dev":
        uvicorn.run("app.main:app", host="127.0.0.1", port=port, reload=True, log_level=log_level)
    else:
        uvicorn.run(
            "app.main:app",
            host=os.environ.get("HOST", "0.0.0.0"),
            port=port,
            proxy_headers=True,
            log_level=log_level,
        )


if __name__ == "__main__":
    main()
