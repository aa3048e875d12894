# File: deluge_bridge/extensions.py
"""Extensions module initializing Flask extensions."""

from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

from .clients import DownloadClientManager

# Initialize Rate Limiter with memory storage (Appliance Philosophy)
# Defaults are strictly opt-in via decorators.
limiter = Limiter(
    key_func=get_remote_address,
    storage_uri="memory://",
)

# Initialize Download Client Manager
download_client = DownloadClientManager()
