"""
Rate limiting for the resolve routes.

Every resolution costs two card database requests, so clients are limited
per remote address to keep within the upstream API's fair-use limits.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

limiter = Limiter(key_func=get_remote_address)
