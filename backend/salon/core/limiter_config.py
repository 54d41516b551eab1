from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

from salon.core.config import get_limiter_storage_uri

# Shared Limiter imported by the controllers; bound to the app in create_app(),
# which also switches it off when RATE_LIMIT_ENABLED=0.
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=["1000 per hour", "200 per minute"],
    storage_uri=get_limiter_storage_uri(),
)

READ_LIMIT = "120 per minute"
WRITE_LIMIT = "30 per minute"
