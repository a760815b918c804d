import logging
import os
import sys
import uvicorn
import socket

# aeroclub.db reads DATABASE_URL at import time; local runs default to a SQLite
# file next to this launcher (or next to the frozen executable).
if not os.getenv("DATABASE_URL"):
    if getattr(sys, "frozen", False):
        base_dir = os.path.dirname(sys.executable)
    else:
        base_dir = os.path.dirname(os.path.abspath(__file__))

    db_path = os.path.join(base_dir, "aeroclub.db")
    os.environ["DATABASE_URL"] = f"sqlite:///{db_path}"
    print(f"[INFO] Using SQLite database at: {db_path}")

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

from aeroclub.config import get_policy  # noqa: E402
from aeroclub.db import init_db  # noqa: E402
from aeroclub.main import app as fastapi_app  # noqa: E402

def find_free_port(start_port=8000, max_attempts=10):
    """Find a free port starting from start_port"""
    for port in range(start_port, start_port + max_attempts):
        try:
            with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
                s.bind(('127.0.0.1', port))
                return port
        except OSError:
            continue
    raise RuntimeError(f"Could not find a free port in range {start_port}-{start_port + max_attempts}")

if __name__ == "__main__":
    # tables for aircraft, missions and schedule blocks
    init_db()
    logging.getLogger("aeroclub").info(f"[start] buffer policy: {get_policy()}")

    wanted = int(os.getenv("AEROCLUB_PORT", "8000"))
    try:
        port = find_free_port(wanted)
        if port != wanted:
            print(f"[WARN] Port {wanted} in use, using port {port} instead")
    except RuntimeError:
        print("[ERROR] No free ports available")
        sys.exit(1)

    uvicorn.run(fastapi_app, host="127.0.0.1", port=port, reload=False)
