"""Error types raised by the relay."""


class RelayError(Exception):
    """Base class for relay errors."""


class InvalidPayload(RelayError):
    """Malformed or incomplete ingestion request."""


class UnknownSubscriberAction(RelayError):
    """Subscriber sent a message the protocol does not accept."""


class DeliveryFailure(RelayError):
    """A message could not be handed to one subscriber."""

    def __init__(self, connection_id: int, reason: str):
        super().__init__(f"Delivery to connection {connection_id} failed: {reason}")
        self.connection_id = connection_id
        self.reason = reason


class InvalidConfig(RelayError, ValueError):
    """Configuration value out of range or unparsable."""
