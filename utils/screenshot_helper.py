import re
from datetime import datetime
from pathlib import Path

from playwright.sync_api import Page


class ScreenshotHelper:
    """按步骤名截图，文件名：<用例名>_<步骤>_<时间戳>.png"""

    def __init__(self, page: Page, test_name: str, screenshot_dir: Path = Path("reports/screenshots")):
        self.page = page
        self.test_name = re.sub(r"\s+", "_", test_name)
        self.screenshot_dir = Path(screenshot_dir)
        self.screenshot_dir.mkdir(parents=True, exist_ok=True)

    def _path(self, step_name: str) -> Path:
        timestamp = datetime.now().strftime("%Y-%m-%dT%H-%M-%S-%f")
        return self.screenshot_dir / f"{self.test_name}_{step_name}_{timestamp}.png"

    def capture(self, step_name: str) -> str:
        path = self._path(step_name)
        self.page.screenshot(path=str(path), full_page=True)
        return str(path)

    def capture_on_failure(self, step_name: str) -> str:
        return self.capture(f"FAILURE_{step_name}")

    def capture_element(self, selector: str, step_name: str) -> str:
        path = self._path(f"{step_name}_element")
        self.page.locator(selector).first.screenshot(path=str(path))
        return str(path)

    def get_all_screenshots(self) -> list:
        return sorted(str(p) for p in self.screenshot_dir.glob(f"{self.test_name}_*.png"))
