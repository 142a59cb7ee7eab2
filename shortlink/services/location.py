"""Location derivation for click events.

``StubLocationResolver`` is a placeholder. It does NOT geolocate: the label is
picked at random from a fixed list, whatever the address. Swap in a real
``LocationResolver`` to get meaningful locations.
"""

import random
from typing import Optional, Protocol, Sequence

STUB_LOCATIONS = (
    "New York, US",
    "London, UK",
    "Tokyo, JP",
    "Mumbai, IN",
    "Sydney, AU",
)


class LocationResolver(Protocol):
    """Anything that turns an IP address into a human readable location."""

    def locate(self, ip_address: Optional[str]) -> str:
        ...


class StubLocationResolver:
    """Placeholder resolver returning a random label from a fixed set."""

    def __init__(
        self,
        labels: Sequence[str] = STUB_LOCATIONS,
        rng: Optional[random.Random] = None
    ):
        if not labels:
            raise ValueError("labels must not be empty")
        self.labels = tuple(labels)
        self._rng = rng or random.Random()

    def locate(self, ip_address: Optional[str]) -> str:
        return self._rng.choice(self.labels)
