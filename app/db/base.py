# Import all models so Base.metadata knows every table (alembic, create_all)
from app.db.base_class import Base  # noqa: F401
from app.db.models.user import User  # noqa: F401
from app.db.models.shopping_group import ShoppingGroup  # noqa: F401
from app.db.models.group_member import GroupMember  # noqa: F401
from app.db.models.product import Product  # noqa: F401
from app.db.models.cart_item import CartItem  # noqa: F401
from app.db.models.wallet_transaction import WalletTransaction  # noqa: F401
from app.db.models.order import Order  # noqa: F401
from app.db.models.request_log import RequestLog  # noqa: F401
