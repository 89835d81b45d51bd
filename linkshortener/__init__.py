from linkshortener.store import MappingStore


__version__ = '0.1.0'

__all__ = [
    'MappingStore',
]
