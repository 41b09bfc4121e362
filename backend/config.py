"""Shared configuration for the MBS rules backend.

This module centralizes environment variable access and default values
to prevent drift between modules.
"""

import os

# Rule catalog configuration
# Explicit path to the normalized catalog; when unset the data directories are probed
MBS_RULES_JSON = os.getenv("MBS_RULES_JSON")
MBS_DATA_DIR = os.getenv("MBS_DATA_DIR", "./data")
MBS_RULES_FILENAME = "mbs_rules.normalized.json"

# API limits
RULES_RATE_LIMIT = os.getenv("RULES_RATE_LIMIT", "120/minute")
MAX_CANDIDATES_PER_REQUEST = int(os.getenv("MAX_CANDIDATES_PER_REQUEST", "200"))
MAX_SELECTED_CODES = int(os.getenv("MAX_SELECTED_CODES", "100"))

# CORS configuration
CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv(
        "CORS_ORIGINS",
        "http://localhost:3000,http://127.0.0.1:3000,http://localhost:5173,http://127.0.0.1:5173",
    ).split(",")
    if origin.strip()
]
