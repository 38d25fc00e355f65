"""
Process entry point: ``python -m docstore_crud``.

Serves the application with uvicorn on BACKEND_HOST:BACKEND_PORT
(default 0.0.0.0:8080). If MongoDB cannot be reached at startup the
lifespan raises and uvicorn exits with a non-zero status.
"""

import uvicorn

from docstore_crud.config import settings


def main() -> None:
    uvicorn.run(
        "docstore_crud.main:app",
        host=settings.backend_host,
        port=settings.backend_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
