"""Server startup - configures logging and serves the API with uvicorn."""
import os
import sys
from pathlib import Path

# Add src directory to Python path for imports
src_dir = Path(__file__).parent / "src"
if str(src_dir) not in sys.path:
    sys.path.insert(0, str(src_dir))

import uvicorn  # noqa: E402

from utils.config import load_config  # noqa: E402
from utils.logging import setup_logging  # noqa: E402

port = int(os.environ.get("PORT", "8000"))

config = load_config()
setup_logging(config["log_level"], json_output=config["log_json"])

from api.server import app  # noqa: E402

print(f"[start.py] Starting on port {port}", flush=True)
uvicorn.run(app, host="0.0.0.0", port=port, log_level=config["log_level"].lower())
