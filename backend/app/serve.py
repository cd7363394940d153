"""Server entry point — runs the SessionGate API under uvicorn.

Invariants:
    - Host, port and log level come from Settings (HOST, PORT, LOG_LEVEL env vars)
    - Single worker: local sessions live in this process's memory
"""

import uvicorn

from app.config import get_settings


def run() -> None:
    settings = get_settings()
    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        workers=1,
    )


if __name__ == "__main__":
    run()
