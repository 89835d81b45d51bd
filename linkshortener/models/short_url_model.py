from dataclasses import dataclass, field
from datetime import datetime, timedelta

from linkshortener.constants import Defaults
from linkshortener.models.click_event_model import ClickEventModel


@dataclass(frozen=True)
class ShortURLModel:
    """Represent a snapshot of a shortened URL mapping.

    Instances are immutable; the data store hands out a fresh snapshot
    after every state transition (creation or click).

    Attributes:
        target (str):
            The original long URL that the short code redirects to.
        shortcode (str):
            The unique short identifier representing the shortened URL.
        created_at (datetime):
            Timezone-aware creation time of the mapping.
        validity_minutes (int):
            Length of the validity window in minutes. Defaults to 30.
        click_count (int):
            Number of successful resolutions so far.
        clicks (tuple[ClickEventModel, ...]):
            Ordered click events, one per successful resolution.

    Example:
        >>> from datetime import datetime, UTC
        >>> url = ShortURLModel(
        ...     target="https://example.com/article/123",
        ...     shortcode="abc123",
        ...     created_at=datetime(2025, 10, 15, 12, 0, tzinfo=UTC),
        ... )
        >>> url.expires_at
        datetime.datetime(2025, 10, 15, 12, 30, tzinfo=datetime.timezone.utc)
        >>> url.is_expired(datetime(2025, 10, 15, 12, 30, tzinfo=UTC))
        False
    """

    target: str
    shortcode: str
    created_at: datetime
    validity_minutes: int = Defaults.VALIDITY_MINUTES
    click_count: int = 0
    clicks: tuple[ClickEventModel, ...] = field(default_factory=tuple)

    @property
    def expires_at(self) -> datetime:
        return self.created_at + timedelta(minutes=self.validity_minutes)

    def is_expired(self, now: datetime) -> bool:
        """Return True iff `now` is strictly past the validity window.

        NOTE: the boundary is inclusive, i.e. a resolution exactly at
              `expires_at` is still valid.
        """
        return now > self.expires_at
