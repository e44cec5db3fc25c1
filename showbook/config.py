"""Runtime settings read from the environment (and a local .env file)."""

import os

from dotenv import load_dotenv

load_dotenv()

LOG_LEVEL = os.getenv("SHOWBOOK_LOG_LEVEL", "INFO").upper()

# Load the demo catalogue into the in-memory repositories at startup
SEED_DEMO_DATA = os.getenv("SHOWBOOK_SEED_DEMO_DATA", "true").lower() == "true"

DEFAULT_COMMISSION_PCT = float(os.getenv("SHOWBOOK_DEFAULT_COMMISSION_PCT", "10"))
DEFAULT_CURRENCY = os.getenv("SHOWBOOK_DEFAULT_CURRENCY", "RON")
