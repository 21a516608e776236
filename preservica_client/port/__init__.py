from typing import Protocol


class Port(Protocol):
    """Marker base for interfaces implemented by infrastructure adapters."""
