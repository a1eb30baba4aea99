"""Domain error taxonomy shared by the cart and order services.

Services raise these; views translate them to HTTP responses with
`error_response`. Input validation errors are DRF's own
`serializers.ValidationError` and never reach this module.
"""

from rest_framework import status
from rest_framework.response import Response


class OrderingError(Exception):
    """Base class for cart/order failures with an HTTP mapping."""

    status_code = status.HTTP_400_BAD_REQUEST
    code = "ordering_error"
    default_detail = "Unable to process request."

    def __init__(self, detail: str | None = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class NotFound(OrderingError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"
    default_detail = "Not found."


class InvalidReference(OrderingError):
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    code = "invalid_reference"
    default_detail = "Price variant does not belong to the item."


class Forbidden(OrderingError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "forbidden"
    default_detail = "You do not have access to this resource."


class EmptyCart(NotFound):
    code = "empty_cart"
    default_detail = "Cart is empty."


class NoValidItems(OrderingError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "no_valid_items"
    default_detail = "No valid items found in cart."


class ConfigurationMissing(OrderingError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "configuration_missing"
    default_detail = "Restaurant configuration is not set up."


class ConflictError(OrderingError):
    status_code = status.HTTP_409_CONFLICT
    code = "conflict"
    default_detail = "Conflicting resource."


class InvalidCode(OrderingError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "invalid_code"
    default_detail = "Invalid or inactive discount code."


class InvalidTransition(OrderingError):
    code = "invalid_transition"
    default_detail = "Order status can only move forward."


def error_response(exc: OrderingError) -> Response:
    """Render a domain error as a DRF response."""

    return Response({"detail": exc.detail, "code": exc.code}, status=exc.status_code)
