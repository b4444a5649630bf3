"""Configuration for MTG printing resolution."""

import os
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

PACKAGE_DIR = Path(__file__).parent

# Card database (Scryfall)
SCRYFALL_API_BASE = os.getenv("SCRYFALL_API_BASE", "https://api.scryfall.com")
SCRYFALL_TIMEOUT = float(os.getenv("SCRYFALL_TIMEOUT", "10.0"))
SCRYFALL_USER_AGENT = os.getenv("SCRYFALL_USER_AGENT", "mtg-print-resolver/0.1")

# Selection
ACCEPT_THRESHOLD = float(os.getenv("ACCEPT_THRESHOLD", "0.4"))
EXACT_MATCH_THRESHOLD = float(os.getenv("EXACT_MATCH_THRESHOLD", "0.8"))
ALTERNATES_THRESHOLD = float(os.getenv("ALTERNATES_THRESHOLD", "0.7"))
MAX_ALTERNATES = int(os.getenv("MAX_ALTERNATES", "5"))

# 'strict' fails with NO_CONFIDENT_MATCH, 'lenient' falls back to the newest printing
FALLBACK_POLICY = os.getenv("FALLBACK_POLICY", "strict")

# Confidence weights (must sum to 1.0)
WEIGHT_SET_CODE = 0.4
WEIGHT_COLLECTOR_NUMBER = 0.3
WEIGHT_RECENCY = 0.2
WEIGHT_SET_NAME = 0.1

# Set code matching: 'graded' (substring / confusion / edit distance) or 'pattern' (tolerant regex)
SET_CODE_STRATEGY = os.getenv("SET_CODE_STRATEGY", "graded")
SET_CODE_SIMILARITY_FLOOR = float(os.getenv("SET_CODE_SIMILARITY_FLOOR", "0.6"))

# Collector number near-miss tolerance (absolute difference)
COLLECTOR_NUMBER_TOLERANCE = int(os.getenv("COLLECTOR_NUMBER_TOLERANCE", "2"))

# Recency prior
RECENCY_DEFAULT = float(os.getenv("RECENCY_DEFAULT", "0.3"))
RECENCY_TABLE_PATH = Path(os.getenv("RECENCY_TABLE_PATH", str(PACKAGE_DIR / "data" / "recency_sets.json")))

# API
API_HOST = os.getenv("API_HOST", "0.0.0.0")
API_PORT = int(os.getenv("API_PORT", "8000"))
API_RATE_LIMIT = os.getenv("API_RATE_LIMIT", "30/minute")

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
