from dataclasses import dataclass
from datetime import datetime


# fmt: off
@dataclass(frozen=True)
class ClickEventModel:
    timestamp: datetime  # Moment of the successful resolution (UTC)
    source: str          # Request source descriptor, e.g. the User-Agent string
    location: str        # Coarse, non-precise geographic label
# fmt: on
