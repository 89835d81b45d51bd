# Event and error codes emitted by the shorten_url handler
INVALID_JSON_BODY = 'INVALID_JSON_BODY'
MISSING_TARGET_URL = 'MISSING_TARGET_URL'
BATCH_TOO_LARGE = 'BATCH_TOO_LARGE'
SHORTEN_SUCCESS = 'SHORTEN_SUCCESS'
