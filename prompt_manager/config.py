"""Application runtime configuration.

Values are read from the process environment (after `.env` loading) at import
time and consumed by the storage layer and entrypoints.
"""

import os
from dotenv import load_dotenv

load_dotenv()

DB_PATH = os.getenv("PROMPT_MANAGER_DB", os.path.join(os.getcwd(), "db.sqlite"))

HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "8787"))

# Sensitive request/response debug logging is opt-in.
DEBUG = os.getenv("DEBUG") == "true"

DEFAULT_PROMPT_OUTPUT_PATH = os.getenv(
    "PROMPT_OUTPUT_PATH", os.path.join(os.getcwd(), "prompt.txt")
)

DEFAULT_HISTORY_LIMIT = 50
