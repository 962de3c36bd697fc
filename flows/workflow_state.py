from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import List, Optional

from data.models import Product, UserCredential
from utils.exceptions import InvalidTransitionError


class Stage(str, Enum):
    START = "Start"
    AUTHENTICATING = "Authenticating"
    LOCKED_OUT = "LockedOut"
    AUTHENTICATED = "Authenticated"
    CATALOG_BROWSED = "CatalogBrowsed"
    ITEMS_IN_CART = "ItemsInCart"
    CART_VERIFIED = "CartVerified"
    CHECKOUT_INFO_ENTERED = "CheckoutInfoEntered"
    OVERVIEW_VERIFIED = "OverviewVerified"
    COMPLETED = "Completed"
    FAILED = "Failed"


TERMINAL_STAGES = {Stage.LOCKED_OUT, Stage.COMPLETED, Stage.FAILED}

# 合法的状态迁移；FAILED 可以从任何非终态进入
TRANSITIONS = {
    Stage.START: {Stage.AUTHENTICATING},
    Stage.AUTHENTICATING: {Stage.LOCKED_OUT, Stage.AUTHENTICATED},
    Stage.AUTHENTICATED: {Stage.CATALOG_BROWSED},
    Stage.CATALOG_BROWSED: {Stage.ITEMS_IN_CART},
    Stage.ITEMS_IN_CART: {Stage.CART_VERIFIED},
    Stage.CART_VERIFIED: {Stage.CART_VERIFIED, Stage.CHECKOUT_INFO_ENTERED},
    Stage.CHECKOUT_INFO_ENTERED: {Stage.OVERVIEW_VERIFIED},
    Stage.OVERVIEW_VERIFIED: {Stage.COMPLETED},
}


@dataclass
class WorkflowState:
    """一次流程运行的状态，只由该次运行的 PurchaseFlow 修改"""
    identity: UserCredential
    selected_products: List[Product] = field(default_factory=list)
    last_known_subtotal: Decimal = Decimal("0")
    stage: Stage = Stage.START
    history: List[Stage] = field(default_factory=lambda: [Stage.START])
    error: Optional[BaseException] = None

    @property
    def is_terminal(self) -> bool:
        return self.stage in TERMINAL_STAGES

    def advance(self, stage: Stage):
        if stage is Stage.FAILED:
            raise InvalidTransitionError("进入 Failed 请使用 fail()")
        if stage not in TRANSITIONS.get(self.stage, set()):
            raise InvalidTransitionError(f"非法的状态迁移：{self.stage.value} -> {stage.value}")
        self.stage = stage
        self.history.append(stage)

    def fail(self, error: BaseException):
        if self.is_terminal:
            raise InvalidTransitionError(f"终态 {self.stage.value} 不能再进入 Failed")
        self.error = error
        self.stage = Stage.FAILED
        self.history.append(Stage.FAILED)
