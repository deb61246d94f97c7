"""
main.py — Server launcher and entry point.

Run this file to start the Bobox unit management API:

    python main.py

The operator dashboard is a separate Streamlit process:

    streamlit run dashboard/app.py

This file does NOT contain application logic. See app.py for the FastAPI
application, service wiring, and startup sequence.

Direct uvicorn usage:
    uvicorn app:app --reload --port 3001
"""

from __future__ import annotations

import uvicorn

from bobox.utils.config import get_settings


def main() -> None:
    """Start the Bobox API server."""
    settings = get_settings()
    base_url = f"http://{settings.host}:{settings.port}"

    print("=" * 60)
    print(f"  {settings.app_name}")
    print("=" * 60)
    print(f"  Server   : {base_url}")
    print(f"  Health   : {base_url}/health")
    print(f"  Units    : {base_url}{settings.api_prefix}/units")
    print(f"  API docs : {base_url}/docs")
    print("=" * 60)
    print("  Press CTRL+C to stop\n")

    # Blocks until CTRL+C
    uvicorn.run(
        "app:app",
        host=settings.host,
        port=settings.port,
        reload=True,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
