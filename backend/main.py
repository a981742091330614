from __future__ import annotations

import os

import uvicorn

from backend.app.main import app


def run() -> None:
    """Serve the stats API; uvicorn's own logging config is disabled in favour of ours."""

    uvicorn.run(
        app,
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", 8000)),
        log_config=None,
    )


if __name__ == "__main__":
    run()
