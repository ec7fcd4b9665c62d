# core/core_models.py
from dataclasses import dataclass, asdict
from typing import Optional

# -------------------------
# Enum-like constants
# -------------------------
ROLE_ADMIN = "ADMIN"
ROLE_TECHNICIAN = "TECHNICIAN"
ROLE_USER = "USER"
ROLES = (ROLE_ADMIN, ROLE_TECHNICIAN, ROLE_USER)

ORDER_STATUSES = (
    "PENDING",
    "WAITING_APPROVAL",
    "APPROVED",
    "IN_PROGRESS",
    "COMPLETED",
    "REJECTED",
    "CANCELLED",
)
EDITABLE_ORDER_STATUSES = ("PENDING", "WAITING_APPROVAL")

COUPON_TYPES = ("PERCENTAGE", "FIXED", "RANDOM")
PAYMENT_METHOD_TYPES = ("COD", "BANK_TRANSFER", "E_WALLET")


def _pick(data, *keys, default=None):
    """Return the first present key; services mix camelCase and snake_case."""
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


def _num(value, default=None):
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _int(value, default=None):
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


# -------------------------
# Users
# -------------------------
@dataclass
class UserProfile:
    id: str
    fullName: str
    email: str
    role: str
    phoneNumber: str = ""
    address: Optional[str] = None
    profilePhoto: Optional[str] = None
    experience: Optional[int] = None
    totalJobsCompleted: int = 0
    totalEarnings: float = 0

    @classmethod
    def from_dict(cls, data):
        data = data or {}
        return cls(
            id=str(_pick(data, "id", default="")),
            fullName=_pick(data, "fullName", "full_name", default=""),
            email=_pick(data, "email", default=""),
            role=str(_pick(data, "role", default="")).upper(),
            phoneNumber=_pick(data, "phoneNumber", "phone_number", default=""),
            address=_pick(data, "address"),
            profilePhoto=_pick(data, "profilePhoto", "profile_photo"),
            experience=_int(_pick(data, "experience")),
            totalJobsCompleted=_int(_pick(data, "totalJobsCompleted", "total_jobs_completed"), 0),
            totalEarnings=_num(_pick(data, "totalEarnings", "total_earnings"), 0),
        )

    def to_dict(self):
        return asdict(self)

    @property
    def is_technician(self):
        return self.role == ROLE_TECHNICIAN


# -------------------------
# Orders
# -------------------------
@dataclass
class Order:
    id: str
    itemName: str
    itemCondition: str
    repairDetails: str
    serviceDate: str
    status: str
    customerId: Optional[str] = None
    technicianId: Optional[str] = None
    technicianName: Optional[str] = None
    paymentMethodId: Optional[str] = None
    couponId: Optional[str] = None
    estimatedCompletionTime: Optional[str] = None
    estimatedPrice: Optional[float] = None
    finalPrice: Optional[float] = None
    repairReport: Optional[str] = None
    createdAt: str = ""
    updatedAt: str = ""
    completedAt: Optional[str] = None

    @classmethod
    def from_dict(cls, data):
        data = data or {}
        return cls(
            id=str(_pick(data, "id", default="")),
            itemName=_pick(data, "itemName", "item_name", default=""),
            itemCondition=_pick(data, "itemCondition", "item_condition", default=""),
            repairDetails=_pick(data, "repairDetails", "repair_details", default=""),
            serviceDate=_pick(data, "serviceDate", "service_date", default=""),
            status=_pick(data, "status", default="PENDING"),
            customerId=_pick(data, "customerId", "customer_id"),
            technicianId=_pick(data, "technicianId", "technician_id"),
            technicianName=_pick(data, "technicianName", "technician_name"),
            paymentMethodId=_pick(data, "paymentMethodId", "payment_method_id"),
            couponId=_pick(data, "couponId", "coupon_id"),
            estimatedCompletionTime=_pick(data, "estimatedCompletionTime", "estimated_completion_time"),
            estimatedPrice=_num(_pick(data, "estimatedPrice", "estimated_price")),
            finalPrice=_num(_pick(data, "finalPrice", "final_price")),
            repairReport=_pick(data, "repairReport", "repair_report"),
            createdAt=_pick(data, "createdAt", "created_at", default=""),
            updatedAt=_pick(data, "updatedAt", "updated_at", default=""),
            completedAt=_pick(data, "completedAt", "completed_at"),
        )

    @property
    def is_editable(self):
        return self.status in EDITABLE_ORDER_STATUSES

    @property
    def service_date_input(self):
        """yyyy-mm-dd slice for <input type="date">."""
        return (self.serviceDate or "")[:10]


# -------------------------
# Coupons
# -------------------------
@dataclass
class Coupon:
    id: str
    code: str
    couponType: str
    discount_amount: float
    max_usage: int
    start_date: str
    end_date: str

    @classmethod
    def from_dict(cls, data):
        data = data or {}
        return cls(
            id=str(_pick(data, "id", default="")),
            code=_pick(data, "code", default=""),
            couponType=_pick(data, "couponType", "coupon_type", default=""),
            discount_amount=_num(_pick(data, "discount_amount", "discountAmount"), 0),
            max_usage=_int(_pick(data, "max_usage", "maxUsage"), 0),
            start_date=_pick(data, "start_date", "startDate", default=""),
            end_date=_pick(data, "end_date", "endDate", default=""),
        )


# -------------------------
# Payment methods
# -------------------------
@dataclass
class PaymentMethod:
    id: str
    name: str
    paymentMethod: str
    description: str = ""
    processingFee: float = 0
    createdBy: Optional[str] = None
    createdAt: Optional[str] = None
    updatedAt: Optional[str] = None
    deletedAt: Optional[str] = None
    accountName: Optional[str] = None
    accountNumber: Optional[str] = None
    bankName: Optional[str] = None
    virtualAccountNumber: Optional[str] = None
    phoneNumber: Optional[str] = None
    instructions: Optional[str] = None
    status: Optional[str] = None
    orderCount: int = 0

    @classmethod
    def from_dict(cls, data):
        data = data or {}
        return cls(
            id=str(_pick(data, "id", default="")),
            name=_pick(data, "name", default=""),
            paymentMethod=_pick(data, "paymentMethod", "payment_method", "methodType", "method_type", default=""),
            description=_pick(data, "description", default=""),
            processingFee=_num(_pick(data, "processingFee", "processing_fee"), 0),
            createdBy=_pick(data, "createdBy", "created_by"),
            createdAt=_pick(data, "createdAt", "created_at"),
            updatedAt=_pick(data, "updatedAt", "updated_at"),
            deletedAt=_pick(data, "deletedAt", "deleted_at"),
            accountName=_pick(data, "accountName", "account_name"),
            accountNumber=_pick(data, "accountNumber", "account_number"),
            bankName=_pick(data, "bankName", "bank_name"),
            virtualAccountNumber=_pick(data, "virtualAccountNumber", "virtual_account_number"),
            phoneNumber=_pick(data, "phoneNumber", "phone_number"),
            instructions=_pick(data, "instructions"),
            status=_pick(data, "status"),
            orderCount=_int(_pick(data, "orderCount", "order_count"), 0),
        )

    @property
    def is_active(self):
        if self.status:
            return str(self.status).upper() == "ACTIVE"
        return self.deletedAt is None

    def form_initial(self):
        return {
            "name": self.name,
            "description": self.description,
            "processingFee": self.processingFee,
            "paymentMethod": self.paymentMethod,
            "accountName": self.accountName or "",
            "accountNumber": self.accountNumber or "",
            "bankName": self.bankName or "",
            "virtualAccountNumber": self.virtualAccountNumber or "",
            "phoneNumber": self.phoneNumber or "",
            "instructions": self.instructions or "",
        }


# -------------------------
# Reviews & ratings
# -------------------------
@dataclass
class Review:
    id: str
    technicianId: str
    comment: str
    rating: int
    userId: Optional[str] = None
    technicianFullName: Optional[str] = None
    createdAt: Optional[str] = None
    owner: bool = False

    @classmethod
    def from_dict(cls, data):
        data = data or {}
        return cls(
            id=str(_pick(data, "id", default="")),
            technicianId=str(_pick(data, "technicianId", "technician_id", default="")),
            comment=_pick(data, "comment", default=""),
            rating=_int(_pick(data, "rating"), 0),
            userId=_pick(data, "userId", "user_id"),
            technicianFullName=_pick(data, "technicianFullName", "technician_full_name"),
            createdAt=_pick(data, "createdAt", "created_at"),
            owner=bool(_pick(data, "owner", default=False)),
        )


@dataclass
class TechnicianRating:
    technicianId: str
    fullName: str
    profilePhoto: Optional[str] = None
    specialization: str = "General Technician"
    experience: Optional[int] = None
    averageRating: float = 0
    totalReviews: int = 0

    @classmethod
    def from_dict(cls, data):
        data = data or {}
        return cls(
            technicianId=str(_pick(data, "technicianId", "technician_id", "id", default="")),
            fullName=_pick(data, "fullName", "full_name", default=""),
            profilePhoto=_pick(data, "profilePhoto", "profile_photo"),
            specialization=_pick(data, "specialization", default="") or "General Technician",
            experience=_int(_pick(data, "experience")),
            averageRating=_num(_pick(data, "averageRating", "average_rating"), 0),
            totalReviews=_int(_pick(data, "totalReviews", "total_reviews"), 0),
        )


# -------------------------
# Notifications
# -------------------------
@dataclass
class Notification:
    id: str
    message: str
    createdAt: Optional[str] = None
    orderId: Optional[str] = None
    read: bool = False

    @classmethod
    def from_dict(cls, data):
        data = data or {}
        return cls(
            id=str(_pick(data, "id", default="")),
            message=_pick(data, "message", "title", default=""),
            createdAt=_pick(data, "createdAt", "created_at"),
            orderId=_pick(data, "orderId", "order_id"),
            read=bool(_pick(data, "read", "isRead", default=False)),
        )
