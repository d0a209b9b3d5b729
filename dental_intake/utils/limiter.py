import os

from slowapi import Limiter
from slowapi.util import get_remote_address

LEAD_RATE_LIMIT = os.getenv("LEAD_RATE_LIMIT", "10/minute")
DIAGNOSIS_RATE_LIMIT = os.getenv("DIAGNOSIS_RATE_LIMIT", "30/minute")
UPLOAD_RATE_LIMIT = os.getenv("UPLOAD_RATE_LIMIT", "10/minute")

limiter = Limiter(key_func=get_remote_address, default_limits=[])
