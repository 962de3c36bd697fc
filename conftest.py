import json
import shutil
from pathlib import Path

import allure
import pytest
from playwright.sync_api import sync_playwright

from config.settings import load_settings
from data.login_data import SAVE_LOGIN_STATE_PATH, SAVE_LOGIN_STATE_FILE
from scripts.save_login_state import save_login_state
from utils.logger import RunLogger

ARTIFACT_DIRS = ["artifacts", "videos", "tracing"]
LOGIN_STATE_FILE = Path(SAVE_LOGIN_STATE_PATH) / SAVE_LOGIN_STATE_FILE


# ================== Session Fixtures ==================
@pytest.fixture(scope="session")
def ui_settings():
    """UI 用例的运行参数（环境变量 / .env）"""
    return load_settings()


@pytest.fixture(scope="session")
def playwright_instance():
    with sync_playwright() as p:
        yield p


@pytest.fixture(scope="session")
def browser(playwright_instance, ui_settings):
    """浏览器只启动一次"""
    browser = playwright_instance.chromium.launch(headless=ui_settings.headless)
    yield browser
    browser.close()


@pytest.fixture(scope="session")
def clean_artifacts():
    """第一个 UI 用例执行前，清空 artifacts、videos、tracing"""
    for path in ARTIFACT_DIRS:
        p = Path(path)
        if p.exists():
            shutil.rmtree(p)
        p.mkdir()


@pytest.fixture(scope="session")
def ensure_login_state(browser):
    """确保 login.json 存在且有效，只有 need_login 的用例会触发"""
    if not LOGIN_STATE_FILE.exists() or LOGIN_STATE_FILE.stat().st_size == 0:
        print("🔐 login.json不存在或无效，重新生成")
        save_login_state(browser)
    else:
        print("✅ login.json已存在且有效，跳过生成")
    return LOGIN_STATE_FILE


# ================== Function Fixtures ==================
@pytest.fixture(scope="function")
def context(browser, request, clean_artifacts):
    """
    每个测试方法一个全新 context
    - need_login 的用例基于 login.json，其余用例从登录页开始
    - 视频 + tracing 只保留失败用例的
    """
    record_video_dir = Path("videos") / request.node.name
    record_tracing_dir = Path("tracing") / request.node.name
    record_video_dir.mkdir(parents=True, exist_ok=True)
    record_tracing_dir.mkdir(parents=True, exist_ok=True)

    storage_state = None
    if request.node.get_closest_marker("need_login") is not None:
        storage_state = str(request.getfixturevalue("ensure_login_state"))

    context = browser.new_context(
        storage_state=storage_state,
        record_video_dir=str(record_video_dir),
        # video文件只有在context.close()后才会真正落盘
        record_video_size={"width": 1280, "height": 720},
        no_viewport=True)

    # tracing 需要手动 start -> stop 并指定zip路径
    context.tracing.start(screenshots=True, snapshots=True, sources=True)

    yield context

    #  ======== teardown阶段 ========
    trace_path = record_tracing_dir / "trace.zip"
    try:
        context.tracing.stop(path=trace_path)  # trace.zip 在这里真正生成
    finally:
        context.close()  # 一定要先close：释放video文件句柄、video真正写入磁盘

    #  ======== 执行成功用例删除video、trace ========
    if not getattr(request.node, "_failed", False):
        shutil.rmtree(record_video_dir, ignore_errors=True)
        shutil.rmtree(record_tracing_dir, ignore_errors=True)
        return

    #  ======== 执行失败用例移动video、trace到artifacts目录 ========
    target_dir = artifact_dir(request.node)
    target_dir.mkdir(parents=True, exist_ok=True)
    for video_file in record_video_dir.glob("*.webm"):
        shutil.move(str(video_file), target_dir / video_file.name)
    if trace_path.exists():
        shutil.move(str(trace_path), target_dir / "trace.zip")

    # pytest_runtest_makereport 早于 fixture teardown，video和trace只能在这里attach
    for video in target_dir.glob("*.webm"):
        allure.attach.file(video, name="Video", attachment_type=allure.attachment_type.WEBM)
    trace = target_dir / "trace.zip"
    if trace.exists():
        allure.attach.file(trace, name="Playwright-Trace.zip")


@pytest.fixture(scope="function")
def page(context):
    """每个测试方法一个新 page"""
    page = context.new_page()
    console_error = []

    # page.on("console")是浏览器级别监听,不会因为跳转丢失
    page.on(
        "console",
        lambda msg: console_error.append({
            "type": msg.type,
            "text": msg.text,
            "location": str(msg.location)
        }) if msg.type == "error" else None
    )
    page._console_errors = console_error  # 挂到page上，方便hook里取
    yield page
    page.close()


@pytest.fixture(scope="function")
def ui_logger(request, ui_settings):
    logger = RunLogger(request.node.name, ui_settings.reports_dir / "logs")
    yield logger
    logger.close()


def artifact_dir(item) -> Path:
    module_name = item.module.__name__.split(".")[-1]
    class_name = item.cls.__name__ if item.cls else "no_class"
    return Path("artifacts") / module_name / class_name / item.name


# ================== Pytest Hook：失败处理 ==================
@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item, call):
    """
    UI 用例失败时自动保存：
    - 截图
    - URL
    - Console errors
    """
    outcome = yield
    rep = outcome.get_result()

    # 只处理 call 阶段失败
    if rep.when != "call" or not rep.failed:
        return

    page = item.funcargs.get("page")
    if not page:
        return

    # 标记失败（告诉 context fixture 保留 video、trace）
    item._failed = True

    base_dir = artifact_dir(item)
    base_dir.mkdir(parents=True, exist_ok=True)

    page.screenshot(path=base_dir / "failure.png", full_page=True)
    (base_dir / "url.txt").write_text(page.url, encoding="utf-8")
    (base_dir / "console_errors.json").write_text(
        json.dumps(getattr(page, "_console_errors", []), indent=2, ensure_ascii=False), encoding="utf-8")

    allure.attach.file(base_dir / "failure.png", name="Failure-Screenshot",
                       attachment_type=allure.attachment_type.PNG)
    allure.attach(page.url, name="Page-Url", attachment_type=allure.attachment_type.TEXT)
    allure.attach.file(base_dir / "console_errors.json", name="Console-Errors",
                       attachment_type=allure.attachment_type.JSON)
