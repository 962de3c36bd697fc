import os
from pathlib import Path
from typing import Optional

from playwright.sync_api import Browser, sync_playwright

from config.pages import URLS, ENV, URL_PATTERNS
from config.settings import load_settings
from data.login_data import LOGIN_USERS, SAVE_LOGIN_STATE_PATH, SAVE_LOGIN_STATE_FILE
from pages.login_page import LoginPage, Authenticated
from utils.logger import RunLogger


def _login_and_save(browser: Browser, logger: RunLogger, login_path: Path):
    context = browser.new_context()
    try:
        page = context.new_page()

        # 使用 Page Object 登录
        login_page = LoginPage(page, logger)
        login_page.open_login(URLS[ENV]["login"])
        user = LOGIN_USERS["success_login"]
        outcome = login_page.login(user["username"], user["password"])
        if not isinstance(outcome, Authenticated):
            raise RuntimeError(f"‼️登录态生成失败：{outcome.message}")
        login_page.actions.wait_url(URL_PATTERNS["inventory"])

        login_path.parent.mkdir(exist_ok=True)  # 确保storage目录一直存在
        context.storage_state(path=str(login_path))  # 保存登录态到login.json
    finally:
        context.close()


def save_login_state(browser: Optional[Browser] = None) -> Path:
    """生成登录态
        pytest 中复用 session 的 browser；
        单独执行该脚本命令：python -m scripts.save_login_state
    """
    logger = RunLogger("save_login_state")
    login_path = Path(SAVE_LOGIN_STATE_PATH) / SAVE_LOGIN_STATE_FILE
    try:
        if browser is not None:
            _login_and_save(browser, logger, login_path)
        else:
            with sync_playwright() as p:
                headless = bool(os.getenv("CI", False)) or load_settings().headless  # CI特殊配置
                own_browser = p.chromium.launch(headless=headless)
                try:
                    _login_and_save(own_browser, logger, login_path)
                finally:
                    own_browser.close()
    finally:
        logger.close()

    # 再次校验文件
    if not login_path.exists() or login_path.stat().st_size == 0:
        raise RuntimeError("‼️ login.json生成失败，请检查浏览器或账号")
    print(f"✅ login.json 已生成 -> {login_path}")
    return login_path


if __name__ == "__main__":
    save_login_state()
