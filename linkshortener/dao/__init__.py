from linkshortener.dao.base import ShortURLBaseDAO
from linkshortener.dao.memory import ShortURLMemoryDAO


__all__ = [
    'ShortURLBaseDAO',
    'ShortURLMemoryDAO',
]
