from enum import Enum


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    DP_PAID = "dp_paid"
    FAILED = "failed"
    REFUNDED = "refunded"


class PaymentMethod(str, Enum):
    GATEWAY = "gateway"  # anything settled through Midtrans we can't classify
    CASH = "cash"
    TRANSFER = "transfer"
    CREDIT_CARD = "credit_card"
    E_WALLET = "e-wallet"


class FieldStatus(str, Enum):
    AVAILABLE = "available"
    BOOKED = "booked"
    MAINTENANCE = "maintenance"
    CLOSED = "closed"


class BookingStatus(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class UserRole(str, Enum):
    SUPER_ADMIN = "super_admin"
    OWNER_CABANG = "owner_cabang"
    ADMIN_CABANG = "admin_cabang"
    USER = "user"
