"""多账号并发运行完整下单流程

每个账号一个线程、一个独立的浏览器会话；线程之间只共享 ResultSink。
"""
import traceback
from concurrent.futures import ThreadPoolExecutor
from contextlib import contextmanager
from datetime import datetime
from typing import Callable, ContextManager, Iterator, List, Optional, Sequence

from playwright.sync_api import Page, sync_playwright

from config.settings import Settings
from data.models import CheckoutInfo, UserCredential
from flows.purchase_flow import PurchaseFlow
from flows.workflow_state import Stage
from reporting.result_sink import ResultSink, RunRecord, FAILED

SessionFactory = Callable[[Settings], ContextManager[Page]]


@contextmanager
def browser_session(settings: Settings) -> Iterator[Page]:
    """sync_playwright 不能跨线程共享，每个线程启动自己的 playwright + browser"""
    with sync_playwright() as p:
        browser = p.chromium.launch(headless=settings.headless)
        context = browser.new_context()
        try:
            yield context.new_page()
        finally:
            context.close()
            browser.close()


def run_single_flow(credential: UserCredential, checkout_info: CheckoutInfo, sink: ResultSink,
                    settings: Settings, session_factory: SessionFactory = browser_session) -> RunRecord:
    """单账号运行，失败时异常向上抛出（运行记录已写入 sink）"""
    with session_factory(settings) as page:
        return PurchaseFlow(page, credential, checkout_info, sink, settings).run()


def _session_failure_record(credential: UserCredential, err: Exception) -> RunRecord:
    now = datetime.now().isoformat(timespec="seconds")
    return RunRecord(
        scenario_name=f"Complete Purchase Flow - {credential.type}",
        username=credential.username,
        user_type=credential.type,
        status=FAILED,
        stage=Stage.START.value,
        error="浏览器会话启动失败：" + "".join(traceback.format_exception(type(err), err, err.__traceback__)),
        start_time=now,
        end_time=now)


def _run_isolated(credential: UserCredential, checkout_info: CheckoutInfo, sink: ResultSink,
                  settings: Settings, session_factory: SessionFactory) -> RunRecord:
    """线程内运行；失败已随 RunRecord 记录，这里转成返回值，不影响其他线程"""
    flow: Optional[PurchaseFlow] = None
    try:
        with session_factory(settings) as page:
            flow = PurchaseFlow(page, credential, checkout_info, sink, settings)
            return flow.run()
    except Exception as err:
        if flow is None or not flow.started:
            record = _session_failure_record(credential, err)
            sink.append(record)
            return record
        return flow.record


def run_purchase_flows(credentials: Sequence[UserCredential], checkout_info: CheckoutInfo, sink: ResultSink,
                       settings: Optional[Settings] = None,
                       session_factory: SessionFactory = browser_session) -> List[RunRecord]:
    """并发运行，返回所有运行记录（顺序与 credentials 一致）"""
    settings = settings or Settings()
    if not credentials:
        return []
    workers = max(1, min(settings.max_workers, len(credentials)))

    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="purchase-flow") as pool:
        futures = [
            pool.submit(_run_isolated, credential, checkout_info, sink, settings, session_factory)
            for credential in credentials
        ]
        return [future.result() for future in futures]
