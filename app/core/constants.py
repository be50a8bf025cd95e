from enum import Enum


class RoleEnum(str, Enum):
    ADMIN = "admin"
    USER = "user"

class GenderEnum(str, Enum):
    MALE = "male"
    FEMALE = "female"

class OrderStatusEnum(str, Enum):
    PROCESSING = "Processing"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"

# Delivered is terminal
ORDER_STATUS_FLOW = {
    OrderStatusEnum.PROCESSING: OrderStatusEnum.SHIPPED,
    OrderStatusEnum.SHIPPED: OrderStatusEnum.DELIVERED,
    OrderStatusEnum.DELIVERED: OrderStatusEnum.DELIVERED,
}

class SortOrderEnum(str, Enum):
    ASC = "asc"
    DESC = "desc"

REVIEW_COMMENT_MAX_LENGTH = 200
MARKETING_COST_RATE = 0.3
