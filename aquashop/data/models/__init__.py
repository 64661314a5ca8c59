#import wszystkich modeli zeby SQLAlchemy je zarejestrowal w base metadata

from aquashop.data.models.order import OrderModel
from aquashop.data.models.order_item import OrderItemModel

__all__ = ["OrderModel", "OrderItemModel"]
