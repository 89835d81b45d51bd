import logging

from linkshortener.types import LambdaEvent, LambdaContext, LambdaResponse
from linkshortener.utils import get_short_url, guarantee_500_response
from linkshortener.lambdas.common import get_store, serialize_short_url, response, response_404
from linkshortener.lambdas.list_urls.constants import SHORT_URL_NOT_FOUND, LIST_SUCCESS


logger = logging.getLogger(__name__)


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests for short URL statistics

    Read-only: neither listing nor looking up a record counts as a click,
    and expired records are included.

    Routes:
        GET /stats              -> all short URLs, ordered by creation time
        GET /stats/{shortcode}  -> a single short URL

    HTTP responses:
        200: statistics
            links (list) or link (dict), each with short_url, target_url,
            created_at, expires_at, is_expired, click_count and clicks
            (timestamp, source, location)
        404: Short URL doesn't exist
        500: Internal server error
    """
    store = get_store()
    now = store.clock()

    shortcode = (event.get('pathParameters') or {}).get('shortcode')
    if shortcode:
        short_url = store.get(shortcode)
        if short_url is None:
            logger.info('Short URL record not found. Responding with 404.', extra={'shortcode': shortcode, 'event': SHORT_URL_NOT_FOUND})
            return response_404(message=f"short url {get_short_url(shortcode, event)} doesn't exist", error_code=SHORT_URL_NOT_FOUND)
        return response(200, {'link': serialize_short_url(short_url, event, now=now, include_clicks=True)})

    links = [serialize_short_url(short_url, event, now=now, include_clicks=True) for short_url in store.list()]
    logger.info('Listing short URLs. Responding with 200.', extra={'event': LIST_SUCCESS, 'count': len(links)})
    return response(200, {'links': links, 'count': len(links)})
