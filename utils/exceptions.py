"""UI流程异常类型

所有异常都带上 selector / timeout 等现场信息，失败时能直接定位到是哪个元素、等了多久。
"""
from typing import Optional, Sequence, Union


class UiFlowError(Exception):
    """所有流程异常的基类"""

    def __init__(self, message: str, selector: Optional[str] = None):
        super().__init__(message)
        self.selector = selector


class ElementNotFoundError(UiFlowError):
    pass


class WaitTimeoutError(UiFlowError, TimeoutError):
    """等待超过上限。selectors 可能是单个 selector，也可能是 wait_for_any_of 的一组"""

    def __init__(self, message: str, selectors: Union[str, Sequence[str]], timeout: float):
        selectors = [selectors] if isinstance(selectors, str) else list(selectors)
        super().__init__(message, selectors[0] if len(selectors) == 1 else None)
        self.selectors = selectors
        self.timeout = timeout


class NotClickableError(UiFlowError):
    """元素可见，但超时时仍是 disabled"""

    def __init__(self, message: str, selector: str, timeout: float):
        super().__init__(message, selector)
        self.timeout = timeout


class ActionError(UiFlowError):
    """等待通过后，driver 执行动作本身失败"""

    def __init__(self, action: str, selector: Optional[str], cause: Exception):
        target = selector if selector is not None else "page"
        super().__init__(f"{action} 失败：{target} - {cause}", selector)
        self.action = action


class ValidationError(UiFlowError):
    """业务校验不通过：数量、价格、提示文案不一致"""


class RequiredFieldError(ValidationError):
    """结算信息必填项为空"""


class AuthenticationError(UiFlowError):
    """登录被意外拒绝，或预期的拒绝没有发生"""


class OutOfStockError(UiFlowError):
    """商品存在，但没有可用的 Add to cart 按钮"""


class DataLoadError(UiFlowError):
    """测试数据文件缺失或格式错误"""


class InvalidTransitionError(UiFlowError):
    pass
