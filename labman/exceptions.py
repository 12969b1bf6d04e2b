"""
Labman Exceptions.

All labman errors are wrapped in LabError for consistent handling.
"""

from typing import Any


class LabError(Exception):
    """
    Base exception for all Labman errors.

    Usage:
        raise LabError('INVALID_STATUS', current='new', requested='paid')

    Attributes:
        code: Error code (INVALID_STATUS, INVOICE_EXISTS, etc.)
        details: Additional context as keyword arguments
    """

    def __init__(self, code: str, **details: Any):
        self.code = code
        self.details = details
        message = f"{code}: {details}" if details else code
        super().__init__(message)

    def as_dict(self) -> dict:
        """Return error as dictionary for API responses."""
        return {"code": self.code, **self.details}

    def __str__(self) -> str:
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"LabError({self.code}: {details_str})"
        return f"LabError({self.code})"


class CyclicBOMError(LabError):
    """
    A product's parent chain loops back on itself.

    Pricing refuses to return a number for such a product.
    """

    def __init__(self, product_id: Any, chain: list):
        super().__init__("CYCLIC_BOM", product_id=product_id, chain=chain)


class MissingReferenceWarning(UserWarning):
    """
    A referenced material or parent product does not exist.

    Never raised: the resolver treats the reference as a zero contribution
    and records it as a labman.results.MissingReference.
    """


# Common error codes
# CYCLIC_BOM: Parent chain revisits a product
# INVALID_QUANTITY: Quantity must be greater than zero
# INVALID_STATUS: Unknown status value
# ORDER_CANCELLED: Cancelled orders cannot be invoiced or edited
# INVOICE_EXISTS: Order already has an active invoice
# PRODUCT_NOT_FOUND: Product does not exist
