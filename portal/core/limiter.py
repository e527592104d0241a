"""Rate limiter instance for SlowAPI.

Shared so main (app.state.limiter) and route modules use the same
instance without circular imports.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

limiter = Limiter(key_func=get_remote_address)

SIGN_IN_LIMIT = "10/minute"
ACCOUNT_CREATE_LIMIT = "30/minute"
BULK_IMPORT_LIMIT = "5/minute"
WRITE_ENDPOINT_LIMIT = "120/minute"

limit_sign_in = limiter.limit(SIGN_IN_LIMIT)
limit_account_create = limiter.limit(ACCOUNT_CREATE_LIMIT)
limit_bulk_import = limiter.limit(BULK_IMPORT_LIMIT)
limit_writes = limiter.limit(WRITE_ENDPOINT_LIMIT)
