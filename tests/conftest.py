"""单元测试 fixture：假 driver + 假商店，不启动浏览器"""
import pytest

from config.settings import Settings
from utils.logger import RunLogger
from fake_driver import FakePage
from fake_shop import FakeShop, BASE_URL


@pytest.fixture
def settings(tmp_path):
    """超时、动画等待全部调小，单元测试秒级跑完"""
    return Settings(
        base_url=BASE_URL,
        default_timeout=500,
        probe_timeout=100,
        poll_interval=10,
        animation_delay=0,
        stable_poll_interval=10,
        stable_time=30,
        reports_dir=tmp_path,
        screenshots_enabled=False,
    )


@pytest.fixture
def run_logger():
    logger = RunLogger("unit_test", console=False)
    yield logger
    logger.close()


@pytest.fixture
def fake_page():
    return FakePage()


@pytest.fixture
def shop(fake_page):
    shop = FakeShop(fake_page)
    shop.show_login()
    return shop


@pytest.fixture
def logged_in_shop(shop):
    """已登录、停留在商品列表页"""
    shop.user = "standard_user"
    shop.show_inventory()
    return shop
