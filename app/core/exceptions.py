class CouldNotImportOrder(Exception):
    """Raised when an inbound Channable order cannot be turned into a quote."""


class NoSuchEntityError(Exception):
    """Raised when a catalog entity cannot be found by its id."""

    def __init__(self, message: str = None, entity_id: int = None):
        self.entity_id = entity_id
        super().__init__(
            message or "The product that was requested doesn't exist. Verify the product and try again."
        )


class CartError(Exception):
    """Raised when the cart refuses a line item."""
