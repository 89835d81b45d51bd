from linkshortener.models.click_event_model import ClickEventModel
from linkshortener.models.short_url_model import ShortURLModel


__all__ = [
    'ClickEventModel',
    'ShortURLModel',
]
