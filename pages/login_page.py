from dataclasses import dataclass
from typing import Optional, Union

from playwright.sync_api import Page

from assertions.login_assert import LoginAssert
from config.locators import LOGIN_LOCATORS, INVENTORY_LOCATORS
from config.settings import Settings
from pages.page_actions import PageActions
from utils.logger import RunLogger


@dataclass(frozen=True)
class Authenticated:
    username: str


@dataclass(frozen=True)
class Rejected:
    username: str
    message: str

    @property
    def locked_out(self) -> bool:
        return "locked out" in self.message.lower()


LoginOutcome = Union[Authenticated, Rejected]


class LoginPage:
    def __init__(self, page: Page, logger: RunLogger, settings: Optional[Settings] = None):
        self.actions = PageActions(page, logger, settings)
        self.logger = logger
        self.username_input = LOGIN_LOCATORS["username_input"]  # 用户名输入框
        self.password_input = LOGIN_LOCATORS["password_input"]  # 密码输入框
        self.login_button = LOGIN_LOCATORS["login_button"]  # 登录按钮
        self.error_message = LOGIN_LOCATORS["error_msg"]  # 登录校验错误提示信息
        self.error_button = LOGIN_LOCATORS["error_button"]
        self.login_logo = LOGIN_LOCATORS["login_logo"]
        self.inventory_list = INVENTORY_LOCATORS["inventory_list"]  # 登录成功后显示商品列表

    # ================= 页面行为 =================
    def open_login(self, login_url: str):
        self.actions.navigate(login_url)
        self.actions.waiter.wait_for_visible(self.username_input, self.actions.settings.default_timeout)

    def login(self, username: str, password: str) -> LoginOutcome:
        """
        提交账号密码，返回登录结果：
        - 出现商品列表 -> Authenticated
        - 出现错误提示 -> Rejected（锁定账号也是 Rejected，由调用方决定是否符合预期）
        两者都没出现则等待超时抛 WaitTimeoutError
        """
        self.logger.info(f"尝试登录，用户名：{username}")
        self.actions.type_text(self.username_input, username)
        self.actions.type_text(self.password_input, password)
        self.actions.click(self.login_button)

        winner = self.actions.waiter.wait_for_any_of(
            [self.error_message, self.inventory_list], self.actions.settings.default_timeout)
        if winner == self.error_message:
            message = self.get_error_message()
            self.logger.warning(f"登录被拒绝：{message}")
            return Rejected(username, message)

        self.logger.success(f"登录成功：{username}")
        return Authenticated(username)

    def clear_login_form(self):
        self.actions.type_text(self.username_input, "", clear_first=False)
        self.actions.type_text(self.password_input, "", clear_first=False)
        self.logger.info("清空登录表单")

    def dismiss_error(self):
        if self.actions.is_visible(self.error_button, timeout=0):
            self.actions.click(self.error_button)
            self.logger.info("关闭登录错误提示")

    # ================= 数据获取 =================
    def get_error_message(self) -> str:
        if self.actions.is_visible(self.error_message, timeout=0):
            return self.actions.read_text(self.error_message)
        return ""

    def is_locked_out(self) -> bool:
        return "locked out" in self.get_error_message().lower()

    def is_on_login_page(self) -> bool:
        return self.actions.is_visible(self.login_logo)

    # ========== 登录校验 ==========
    def verify_login_fail(self, expect_msg: str):
        LoginAssert.error_message(self.get_error_message(), expect_msg)
