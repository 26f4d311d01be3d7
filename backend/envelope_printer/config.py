"""
Runtime configuration.

Values are read once from the environment (optionally via a local .env file).
Defaults mirror the settings panel defaults of the envelope printer UI.
"""

import os

from dotenv import load_dotenv

load_dotenv()

DEFAULT_RETURN_ADDRESS = "Your Name\n123 Your Street\nYour City, ST 12345"

ENVELOPE_DEFAULT_SIZE = os.getenv("ENVELOPE_DEFAULT_SIZE", "standard")
ENVELOPE_DEFAULT_FONT_SIZE = float(os.getenv("ENVELOPE_DEFAULT_FONT_SIZE", "14"))
ENVELOPE_DEFAULT_FONT_FAMILY = os.getenv("ENVELOPE_DEFAULT_FONT_FAMILY", "Arial")

# Stored with literal "\n" sequences in .env files; expand them here.
ENVELOPE_RETURN_ADDRESS = os.getenv(
    "ENVELOPE_RETURN_ADDRESS", DEFAULT_RETURN_ADDRESS
).replace("\\n", "\n")

ENVELOPE_MAX_FILE_BYTES = int(os.getenv("ENVELOPE_MAX_FILE_BYTES", str(10 * 1024 * 1024)))
ENVELOPE_UPLOAD_TTL_SECONDS = int(os.getenv("ENVELOPE_UPLOAD_TTL_SECONDS", str(15 * 60)))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
