class AuctionException(Exception):
    """Base class for all errors raised by fantasy_auction."""


class ConfigurationError(AuctionException):
    """Raised when league or valuation settings make the dollar pool ill-defined."""

    def __init__(self, message: str, field: str | None = None) -> None:
        self.field = field
        super().__init__(message)


class PickError(AuctionException):
    """A draft pick that must not be applied. Recoverable: draft state is unchanged."""

    def __init__(self, message: str, player_key: str, price: float) -> None:
        self.player_key = player_key
        self.price = price
        super().__init__(message)


class UnknownPlayerError(PickError):
    def __init__(self, player_key: str, price: float) -> None:
        super().__init__(f"Unknown player '{player_key}' (attempted price ${price:g})", player_key, price)


class AlreadyDraftedError(PickError):
    def __init__(self, player_key: str, price: float, drafted_by: str | None = None) -> None:
        self.drafted_by = drafted_by
        owner = f" by {drafted_by}" if drafted_by else ""
        super().__init__(
            f"Player '{player_key}' was already drafted{owner} (attempted price ${price:g})",
            player_key,
            price,
        )


class InvalidPickError(PickError):
    def __init__(self, player_key: str, price: float) -> None:
        super().__init__(
            f"Invalid price ${price:g} for player '{player_key}': must be a finite amount >= 0",
            player_key,
            price,
        )


class SessionError(AuctionException):
    """A draft session is missing, already exists, or its stored data is unreadable."""

    def __init__(self, message: str, session: str) -> None:
        self.session = session
        super().__init__(message)


class ProjectionSourceError(AuctionException):
    """A projection file could not be read or does not hold projection records."""

    def __init__(self, message: str, path: str) -> None:
        self.path = path
        super().__init__(message)
