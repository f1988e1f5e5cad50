#import wszystkich modeli zeby SQLAlchemy je zarejestrowal w base metadata

from storefront.data.models.user import UserModel
from storefront.data.models.product import ProductModel
from storefront.data.models.location import DeliveryZoneModel, PickupLocationModel, CustomerAddressModel
from storefront.data.models.cart import CartModel
from storefront.data.models.cart_item import CartItemModel
from storefront.data.models.app_settings import AppSettingsModel
from storefront.data.models.activity import CustomerActivityModel
from storefront.data.models.order import OrderModel, OrderItemModel
from storefront.data.models.checkout_session import CheckoutSessionModel

__all__ = [
    "UserModel",
    "ProductModel",
    "DeliveryZoneModel",
    "PickupLocationModel",
    "CustomerAddressModel",
    "CartModel",
    "CartItemModel",
    "AppSettingsModel",
    "CustomerActivityModel",
    "OrderModel",
    "OrderItemModel",
    "CheckoutSessionModel",
]
