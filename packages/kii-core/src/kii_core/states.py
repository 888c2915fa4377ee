from enum import Enum

class LayoutPosition(Enum):
    """Enumeration of positions a thing can take in a gateway layout."""
    END_NODE = "END_NODE"
    STANDALONE = "STANDALONE"
    GATEWAY = "GATEWAY"

    def __str__(self) -> str:
        return self.value
