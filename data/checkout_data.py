"""checkout功能测试数据：收货人信息、错误提示、完成页文案"""

CONTAINER_INFO = {"first_name": "John", "last_name": "Doe", "postal": "12345"}

# 收货人信息留空点击 continue 的错误提示（按表单顺序只提示第一个空字段）
CONTAINER_EMPTY_ERROR_MSG = {
    "first_name": "First Name is required",
    "last_name": "Last Name is required",
    "postal": "Postal Code is required",
}

FINISH_PAGE_MESSAGE = "Thank you for your order!"
