"""
Development server for the Capital Conquest API.
Serves the FastAPI app with auto-reload.
"""

import logging
import os

import uvicorn

HOST = os.environ.get("CONQUEST_HOST", "127.0.0.1")
PORT = int(os.environ.get("CONQUEST_PORT", "8000"))

if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    print(f"Serving at http://{HOST}:{PORT}")
    print(f"Open http://{HOST}:{PORT}/docs to try the API")
    print("Press Ctrl+C to stop")
    uvicorn.run("conquest.api.main:app", host=HOST, port=PORT, reload=True)
