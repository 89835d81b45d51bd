"""Abstract base class for ShortURL data access objects (DAOs).

This class establishes a consistent contract for all ShortURL DAO implementations,
regardless of the underlying storage mechanism (e.g., in-process memory, Redis).

Responsibilities:
    - Provide an interface for inserting and retrieving ShortURLModel objects.
    - Guarantee that "check shortcode unused" + "insert" is a single atomic step.
    - Guarantee that "check expiry" + "append click" + "increment counter" is a
      single atomic step per record.
    - Standardize error handling across multiple data store implementations.

Example:
    Typical usage with a datastore-specific implementation:

        >>> from datetime import datetime, UTC
        >>> from linkshortener.models import ShortURLModel, ClickEventModel
        >>> from linkshortener.dao.memory import ShortURLMemoryDAO

        >>> dao = ShortURLMemoryDAO()

        >>> short_url = ShortURLModel(
        ...     target="https://example.com/blog/article-123",
        ...     shortcode="a1b2c3",
        ...     created_at=datetime.now(UTC),
        ... )
        >>> dao.insert(short_url)

        >>> click = ClickEventModel(timestamp=datetime.now(UTC), source='curl/8.5', location='DE')
        >>> dao.hit("a1b2c3", click).click_count
        1

TODO:
    - Consider whether the DAO should allow purging expired entries (freeing their shortcodes).
"""

from abc import ABC, abstractmethod

from linkshortener.models import ShortURLModel, ClickEventModel


class ShortURLBaseDAO(ABC):
    """Interface for ShortURL data access objects (DAOs).

    Methods:
        insert(short_url: ShortURLModel, **kwargs) -> ShortURLBaseDAO:
            Insert a new ShortURLModel into the data store if its shortcode is unused.
            Raises ShortURLAlreadyExistsError if the short code already exists.
            Raises DataStoreError on connection or write failure.

        get(shortcode: str, **kwargs) -> ShortURLModel | None:
            Retrieve a ShortURLModel snapshot regardless of its expiry state.
            Returns None if not found.
            Raises DataStoreError on connection or read failure.

        exists(shortcode: str, **kwargs) -> bool:
            Check whether a shortcode is taken (live or expired record).

        hit(shortcode: str, click: ClickEventModel, **kwargs) -> ShortURLModel:
            Record a successful resolution and return the updated snapshot.
            Raises ShortURLNotFoundError if the entry does not exist.
            Raises ShortURLExpiredError if the entry expired before `click.timestamp`.

        all(**kwargs) -> list[ShortURLModel]:
            Snapshot all records (live and expired) ordered by creation time.

        close() -> None:
            Release resources held by the data store.

    Subclassing:
        Datastore-specific implementations (e.g., ShortURLMemoryDAO or
        ShortURLRedisDAO) must extend this class and implement all
        abstract methods.

    NOTE:
        - Expired mappings are never deleted by the DAO. They stay visible
          to get() and all() and keep their shortcode reserved.
    """

    @abstractmethod
    def insert(self, short_url: ShortURLModel, **kwargs) -> 'ShortURLBaseDAO':
        """Insert a new ShortURLModel into the data store.

        Args:
            short_url (ShortURLModel):
                The ShortURLModel instance to be inserted.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            ShortURLBaseDAO: self (for method chaining)

        Raises:
            ShortURLAlreadyExistsError:
                If a ShortURLModel with the same short code already exists

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def get(self, shortcode: str, **kwargs) -> ShortURLModel | None:
        """Retrieve a ShortURLModel from the data store by its short code.

        Args:
            shortcode (str):
                The short code of the ShortURLModel to be retrieved.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            ShortURLModel | None: The ShortURLModel instance if found, otherwise None.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def exists(self, shortcode: str, **kwargs) -> bool:
        """Check whether a record with this short code exists (live or expired)."""
        pass

    @abstractmethod
    def hit(self, shortcode: str, click: ClickEventModel, **kwargs) -> ShortURLModel:
        """Record a click on a short URL.

        The expiry check, the click event append and the click counter
        increment happen as one atomic step per record.

        Args:
            shortcode (str):
                The short code of the ShortURLModel being resolved.

            click (ClickEventModel):
                Click event to append. Its timestamp is used for the expiry check.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            ShortURLModel: snapshot including the new click.

        Raises:
            ShortURLNotFoundError:
                If no ShortURLModel with the given short code exists.

            ShortURLExpiredError:
                If the ShortURLModel expired before the click (no state change).

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def all(self, **kwargs) -> list[ShortURLModel]:
        """Snapshot every stored ShortURLModel, ordered by creation time."""
        pass

    def close(self) -> None:
        """Release resources held by the data store (no-op by default)."""
        return None
