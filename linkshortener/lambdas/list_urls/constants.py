# Event and error codes emitted by the list_urls handler
SHORT_URL_NOT_FOUND = 'SHORT_URL_NOT_FOUND'
LIST_SUCCESS = 'LIST_SUCCESS'
