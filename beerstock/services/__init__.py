"""Service layer — business rules on top of the DAOs."""


class ServiceError(Exception):
    """Base service exception."""


class NotFoundError(ServiceError):
    """Unknown beer id or name (-> HTTP 404)."""


class ValidationError(ServiceError):
    """Missing or out-of-range input (-> HTTP 400)."""


class AlreadyRegisteredError(ServiceError):
    """A beer with the same name already exists (-> HTTP 400)."""

    def __init__(self, name: str) -> None:
        super().__init__(f"beer with name {name!r} already registered")
        self.name = name


class StockError(ServiceError):
    """Stock adjustment would break ``0 <= quantity <= max`` (-> HTTP 400)."""

    def __init__(self, message: str, beer_id: int, quantity: int) -> None:
        super().__init__(message)
        self.beer_id = beer_id
        self.quantity = quantity


class StockExceededError(StockError):
    def __init__(self, beer_id: int, quantity: int) -> None:
        super().__init__(
            f"beer with id {beer_id} would exceed its stock capacity: "
            f"quantity to increment {quantity}",
            beer_id,
            quantity,
        )


class StockBelowZeroError(StockError):
    def __init__(self, beer_id: int, quantity: int) -> None:
        super().__init__(
            f"beer with id {beer_id} would drop below zero: "
            f"quantity to decrement {quantity}",
            beer_id,
            quantity,
        )
