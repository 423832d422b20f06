"""Domain error taxonomy.

Every failure raised by the service layer derives from CanteenError and carries a
stable machine code, a short human readable message and the HTTP status the API
layer renders it with. The unified handler in ``canteen.create_app`` turns them
into ``{"success": false, "error": code, "message": message}``.
"""
from __future__ import annotations
from typing import Any, Dict, Optional


class CanteenError(Exception):
    code = 'CanteenError'
    http_status = 400
    default_message = 'Request failed'

    def __init__(self, message: Optional[str] = None, **details: Any):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        payload = {'success': False, 'error': self.code, 'message': self.message}
        if self.details:
            payload['details'] = self.details
        return payload


class EmptyCart(CanteenError):
    code = 'EmptyCart'
    default_message = 'Cart is empty'


class NotAuthenticated(CanteenError):
    code = 'NotAuthenticated'
    http_status = 401
    default_message = 'Please login to place order'


class InvalidCredentials(CanteenError):
    code = 'InvalidCredentials'
    http_status = 401
    default_message = 'Invalid email or password'


class Forbidden(CanteenError):
    code = 'Forbidden'
    http_status = 403
    default_message = 'Access denied'


class RecordNotFound(CanteenError):
    code = 'RecordNotFound'
    http_status = 404
    default_message = 'Not found'


class OrderNotFound(RecordNotFound):
    code = 'OrderNotFound'
    default_message = 'Order not found'


class MenuItemNotFound(RecordNotFound):
    code = 'MenuItemNotFound'
    default_message = 'Item not found'


class CartItemNotFound(RecordNotFound):
    code = 'CartItemNotFound'
    default_message = 'Item not in cart'


class StaffNotFound(RecordNotFound):
    code = 'StaffNotFound'
    default_message = 'Staff member not found'


class ValidationFailed(CanteenError):
    code = 'ValidationFailed'
    default_message = 'Invalid input'


class InvalidTransition(CanteenError):
    code = 'InvalidTransition'
    http_status = 409
    default_message = 'Invalid status transition'


class StorageUnavailable(CanteenError):
    code = 'StorageUnavailable'
    http_status = 503
    default_message = 'Storage is unavailable'


__all__ = [
    'CanteenError', 'EmptyCart', 'NotAuthenticated', 'InvalidCredentials', 'Forbidden',
    'RecordNotFound', 'OrderNotFound', 'MenuItemNotFound', 'CartItemNotFound', 'StaffNotFound',
    'ValidationFailed', 'InvalidTransition', 'StorageUnavailable',
]
