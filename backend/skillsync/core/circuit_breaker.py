# skillsync/core/circuit_breaker.py

from slowapi import Limiter
from slowapi.util import get_remote_address

# Initialize limiter
limiter = Limiter(key_func=get_remote_address)

# Rate limit constants
SEND_MESSAGE_LIMIT = "30/minute"
DEVICE_REGISTER_LIMIT = "10/minute"
BOOK_SESSION_LIMIT = "20/minute"
