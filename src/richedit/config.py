"""Local configuration for richedit."""

from __future__ import annotations

import os


DEFAULT_HISTORY_DEPTH = 100
DEFAULT_MAX_UPLOAD_BYTES = 10 * 1024 * 1024
DEFAULT_STORAGE_URL = "http://localhost:54321"
DEFAULT_STORAGE_BUCKET = "blog-images"
DEFAULT_STORAGE_PREFIX = "content"
DEFAULT_IMAGE_TABLE = "blog_images"
DEFAULT_UPLOAD_TIMEOUT_S = 30.0
DEFAULT_UPLOAD_MAX_RETRIES = 2
DEFAULT_UPLOAD_BACKOFF_S = 0.5
DEFAULT_USER_AGENT = "richedit/0.1"

# Table size picker bounds (rows x cols).
TABLE_PICKER_MAX_ROWS = 8
TABLE_PICKER_MAX_COLS = 6

RICHEDIT_HISTORY_DEPTH = int(os.getenv("RICHEDIT_HISTORY_DEPTH", str(DEFAULT_HISTORY_DEPTH)))
RICHEDIT_MAX_UPLOAD_BYTES = int(os.getenv("RICHEDIT_MAX_UPLOAD_BYTES", str(DEFAULT_MAX_UPLOAD_BYTES)))
RICHEDIT_STORAGE_URL = os.getenv("RICHEDIT_STORAGE_URL", DEFAULT_STORAGE_URL).rstrip("/")
RICHEDIT_STORAGE_KEY = os.getenv("RICHEDIT_STORAGE_KEY", "")
RICHEDIT_STORAGE_BUCKET = os.getenv("RICHEDIT_STORAGE_BUCKET", DEFAULT_STORAGE_BUCKET)
RICHEDIT_STORAGE_PREFIX = os.getenv("RICHEDIT_STORAGE_PREFIX", DEFAULT_STORAGE_PREFIX)
RICHEDIT_IMAGE_TABLE = os.getenv("RICHEDIT_IMAGE_TABLE", DEFAULT_IMAGE_TABLE)
RICHEDIT_UPLOAD_TIMEOUT_S = float(os.getenv("RICHEDIT_UPLOAD_TIMEOUT_S", str(DEFAULT_UPLOAD_TIMEOUT_S)))
RICHEDIT_UPLOAD_MAX_RETRIES = int(os.getenv("RICHEDIT_UPLOAD_MAX_RETRIES", str(DEFAULT_UPLOAD_MAX_RETRIES)))
RICHEDIT_UPLOAD_BACKOFF_S = float(os.getenv("RICHEDIT_UPLOAD_BACKOFF_S", str(DEFAULT_UPLOAD_BACKOFF_S)))
RICHEDIT_USER_AGENT = os.getenv("RICHEDIT_USER_AGENT", DEFAULT_USER_AGENT)
