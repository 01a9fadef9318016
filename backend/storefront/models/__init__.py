from .users import User, ROLE_CUSTOMER, ROLE_ADMIN
from .catalog import Category, Product
from .orders import (
    Order,
    OrderItem,
    ORDER_STATUSES,
    ORDER_NOT_PROCESSED,
    ORDER_PROCESSING,
    ORDER_SHIPPED,
    ORDER_DELIVERED,
    ORDER_CANCELLED,
)

__all__ = [
    'User', 'ROLE_CUSTOMER', 'ROLE_ADMIN',
    'Category', 'Product',
    'Order', 'OrderItem', 'ORDER_STATUSES',
    'ORDER_NOT_PROCESSED', 'ORDER_PROCESSING', 'ORDER_SHIPPED',
    'ORDER_DELIVERED', 'ORDER_CANCELLED',
]
