import json
import logging
from typing import Any

from linkshortener.store import MappingStore
from linkshortener.types import LambdaEvent, LambdaContext, LambdaResponse
from linkshortener.dao.exceptions import ValidationError, ShortURLAlreadyExistsError
from linkshortener.utils import guarantee_500_response
from linkshortener.lambdas.common import (
    get_store,
    serialize_short_url,
    response,
    response_400,
)
from linkshortener.lambdas.shorten_url.constants import (
    INVALID_JSON_BODY,
    MISSING_TARGET_URL,
    BATCH_TOO_LARGE,
    SHORTEN_SUCCESS,
)


logger = logging.getLogger(__name__)


def _optional(value: Any) -> Any:
    """Treat blank form fields as omitted"""
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


def shorten(store: MappingStore, link: dict[str, Any], event: LambdaEvent) -> tuple[int, dict[str, Any]]:
    """Shorten a single link request

    Args:
        store (MappingStore): store to create the mapping in
        link (dict): {"target_url": ..., "validity_minutes"?: ..., "shortcode"?: ...}
        event (dict): API Gateway event (used to build the public short URL)

    Returns:
        tuple[int, dict]: HTTP status code and response body
    """
    if not isinstance(link, dict) or not link.get('target_url'):
        return 400, {'message': "Bad Request (missing 'target_url')", 'errorCode': MISSING_TARGET_URL}

    try:
        short_url = store.create(
            link['target_url'],
            validity_minutes=_optional(link.get('validity_minutes')),
            shortcode=_optional(link.get('shortcode')),
        )
    except ValidationError as e:
        return 400, {'message': f'Bad Request ({e})', 'errorCode': e.error_code}
    except ShortURLAlreadyExistsError as e:
        return 409, {'message': f'Conflict ({e})', 'errorCode': e.error_code}

    data = serialize_short_url(short_url, event, now=store.clock())
    data['message'] = f"Successfully shortened {short_url.target} to {data['short_url']}"
    return 200, data


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests to shorten URLs

    This handler follows this procedure to shorten URLs:
    - Step 1: Parse the JSON request body
    - Step 2: Create one mapping (single request) or up to 5 mappings (batch request)
    - Step 3: Respond with the created short URL(s)

    Request bodies:
        single: {"target_url": "https://...", "validity_minutes": 30, "shortcode": "my-link"}
        batch:  {"links": [{"target_url": ...}, ...]}

    HTTP responses:
        200: Successful URL shortening (batch: per-link results, see below)
            short_url, shortcode, target_url, expires_at, ...
        400: Bad client request
            message + errorCode: invalid JSON, missing target_url, invalid URL,
            invalid validity, invalid shortcode format, batch too large
        409: Requested shortcode is already in use
        500: Internal server error

    Batch responses always return 200 with a `results` list holding each
    link's own `statusCode` and body, so one bad link doesn't fail the others.

    Example:
        >>> event = {'body': '{"target_url": "https://example.com"}'}
        >>> response = lambda_handler(event, None)
        >>> response['statusCode']
        200
    """
    # 1- Parse request body
    try:
        request_body = json.loads(event.get('body') or '{}')
    except json.JSONDecodeError:
        logger.info('Invalid JSON body. Responding with 400.', extra={'event': INVALID_JSON_BODY})
        return response_400(message='invalid JSON body', error_code=INVALID_JSON_BODY)
    if not isinstance(request_body, dict):
        return response_400(message='JSON body must be an object', error_code=INVALID_JSON_BODY)

    store = get_store()

    # 2a- Batch request
    if 'links' in request_body:
        links = request_body['links']
        max_batch_size = store.max_batch_size
        if not isinstance(links, list) or not links or len(links) > max_batch_size:
            return response_400(message=f'links must be a list of 1-{max_batch_size} items', error_code=BATCH_TOO_LARGE)

        results = []
        for link in links:
            status_code, body = shorten(store, link, event)
            results.append({'statusCode': status_code, **body})
        logger.info(
            'Processed batch shorten request. Responding with 200.',
            extra={'event': SHORTEN_SUCCESS, 'batchSize': len(links), 'created': sum(r['statusCode'] == 200 for r in results)},
        )
        return response(200, {'results': results})

    # 2b- Single request
    status_code, body = shorten(store, request_body, event)
    if status_code == 200:
        logger.info('Shortened URL. Responding with 200.', extra={'event': SHORTEN_SUCCESS, 'shortcode': body['shortcode']})
    else:
        logger.info('Rejected shorten request. Responding with %s.', status_code, extra={'event': body['errorCode']})
    return response(status_code, body)
