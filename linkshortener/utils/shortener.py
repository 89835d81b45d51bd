"""Shortcode generation utility

This module provides a generator of short, random, collision-checked codes
suitable for use as URL slugs.

Classes:
    ShortcodeGenerator:
        Draw random Base62 codes and retry on collisions.

Functions:
    random_shortcode(length=6) -> str:
        Draw a single random Base62 code.

Example:
    >>> from linkshortener.utils import ShortcodeGenerator
    >>> taken = {'abc123'}
    >>> code = ShortcodeGenerator().generate(taken.__contains__)
    >>> len(code)
    6
"""

import secrets
import logging
from collections.abc import Callable

from linkshortener.constants import Shortcode


logger = logging.getLogger(__name__)

ALPHABET = Shortcode.ALPHABET
BASE = len(ALPHABET)  # 10 digits + 26 lowercase + 26 uppercase


def random_shortcode(length: int = Shortcode.LENGTH) -> str:
    """Draw `length` symbols uniformly from the Base62 alphabet

    NOTE: uses the `secrets` CSPRNG so codes can't be predicted from
          previously issued ones. `secrets.choice` draws without modulo bias.

    Args:
        length (int): number of symbols. Defaults to 6.

    Returns:
        str: random code, e.g. 'q0Zr8K'

    Raises:
        ValueError: if length is not a positive integer.
    """
    if not isinstance(length, int) or isinstance(length, bool) or length <= 0:
        raise ValueError(f'Length must be a positive integer (given value: {length!r}).')
    return ''.join(secrets.choice(ALPHABET) for _ in range(length))


class ShortcodeGenerator:
    """Produce short, collision-free codes

    The generator owns no state beyond its configuration; uniqueness is
    checked through the `exists` callback handed in by the data store.

    Attributes:
        length (int):
            Number of symbols per generated code. Defaults to 6.
        max_attempts (int):
            Draws at `length` before falling back to `length + 2`. Defaults to 50.

    Example:
        >>> generator = ShortcodeGenerator(length=8)
        >>> generator.generate(lambda code: False)
        'Xb0q1PzA'
    """

    def __init__(self, length: int = Shortcode.LENGTH, max_attempts: int = Shortcode.MAX_ATTEMPTS):
        if not isinstance(length, int) or isinstance(length, bool) or length <= 0:
            raise ValueError(f'Length must be a positive integer (given value: {length!r}).')
        if not isinstance(max_attempts, int) or isinstance(max_attempts, bool) or max_attempts <= 0:
            raise ValueError(f'Max attempts must be a positive integer (given value: {max_attempts!r}).')

        self.length = length
        self.max_attempts = max_attempts

    def generate(
        self,
        exists: Callable[[str], bool],
        length: int | None = None,
        max_attempts: int | None = None,
    ) -> str:
        """Generate a shortcode which `exists` reports as unused

        Draws up to `max_attempts` codes of `length` symbols. If all of them
        collide, draws a single code of `length + 2` symbols and returns it
        unconditionally, which bounds worst-case latency.

        NOTE: the returned code is only free at the moment of the check.
              Callers must still insert it with an insert-if-absent primitive.

        Args:
            exists (Callable[[str], bool]):
                Liveness check into the data store, True if the code is taken.
            length (int | None):
                Overrides the configured length.
            max_attempts (int | None):
                Overrides the configured number of attempts.

        Returns:
            str: new shortcode.
        """
        length = self.length if length is None else length
        max_attempts = self.max_attempts if max_attempts is None else max_attempts

        for _ in range(max_attempts):
            candidate = random_shortcode(length)
            if not exists(candidate):
                return candidate

        # Only reached when the keyspace at `length` is nearly exhausted
        logger.warning(
            'All shortcode draws collided. Falling back to a longer shortcode.',
            extra={'length': length, 'maxAttempts': max_attempts},
        )
        return random_shortcode(length + Shortcode.FALLBACK_EXTRA_LENGTH)
