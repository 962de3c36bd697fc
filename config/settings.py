"""运行参数：超时、轮询间隔、动画等待、并发数等，全部可用环境变量覆盖（支持 .env）"""
import os
from dataclasses import dataclass, field, replace
from pathlib import Path

from dotenv import load_dotenv

from config.pages import URLS, ENV

load_dotenv()

_BOOL = {"1", "true", "yes", "on", "y", "t"}


def _as_bool(v, default: bool = False) -> bool:
    if v is None:
        return default
    return v.strip().lower() in _BOOL


def _as_int(v, default: int) -> int:
    try:
        return int(v)
    except (TypeError, ValueError):
        return default


@dataclass(frozen=True)
class Settings:
    base_url: str = URLS[ENV]["login"]
    # 单位统一为毫秒，和 Playwright 的 timeout 保持一致
    default_timeout: int = 10_000  # 动作前的就绪等待
    probe_timeout: int = 5_000  # is_visible 之类的探测等待
    poll_interval: int = 100  # 轮询间隔
    animation_delay: int = 500  # 加购/删除后的动画等待
    stable_poll_interval: int = 100  # 位置稳定采样间隔
    stable_time: int = 500  # 位置需要保持不变的时长
    product_count: int = 2  # 选取最贵的 N 个商品
    remove_one_item: bool = True  # 是否执行购物车删除一件商品的步骤
    headless: bool = True
    max_workers: int = 3
    reports_dir: Path = field(default_factory=lambda: Path("reports"))
    screenshots_enabled: bool = True

    def with_overrides(self, **kwargs) -> "Settings":
        return replace(self, **kwargs)


def load_settings() -> Settings:
    return Settings(
        base_url=os.getenv("BASE_URL", URLS[ENV]["login"]),
        default_timeout=_as_int(os.getenv("DEFAULT_TIMEOUT_MS"), 10_000),
        probe_timeout=_as_int(os.getenv("PROBE_TIMEOUT_MS"), 5_000),
        poll_interval=_as_int(os.getenv("POLL_INTERVAL_MS"), 100),
        animation_delay=_as_int(os.getenv("ANIMATION_DELAY_MS"), 500),
        stable_poll_interval=_as_int(os.getenv("STABLE_POLL_INTERVAL_MS"), 100),
        stable_time=_as_int(os.getenv("STABLE_TIME_MS"), 500),
        product_count=_as_int(os.getenv("PRODUCT_COUNT"), 2),
        remove_one_item=_as_bool(os.getenv("REMOVE_ONE_ITEM"), True),
        headless=_as_bool(os.getenv("HEADLESS"), True),
        max_workers=_as_int(os.getenv("MAX_WORKERS"), 3),
        reports_dir=Path(os.getenv("REPORTS_DIR", "reports")),
        screenshots_enabled=_as_bool(os.getenv("SCREENSHOTS_ENABLED"), True),
    )
