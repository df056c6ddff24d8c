"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidExchangeRateError(DomainException):
    """Currency conversion requested without a positive exchange rate"""

    pass


class CatalogFieldMissingError(DomainException):
    """Catalog product lacks a field required for evaluation"""

    def __init__(self, product_id: str, field_name: str):
        super().__init__(f"Product {product_id} is missing '{field_name}'")
        self.product_id = product_id
        self.field_name = field_name


class CatalogAPIError(DomainException):
    """Product catalog returned an error or is unavailable"""

    pass


class SimulationNotFoundError(DomainException):
    """No stored simulation matches the reference number"""

    pass


class NotificationError(DomainException):
    """Notification could not be delivered after all retries"""

    pass
