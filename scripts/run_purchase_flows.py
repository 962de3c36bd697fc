"""多账号并发跑完整下单流程

    python -m scripts.run_purchase_flows --users standard problem --workers 2
结果：reports/results.jsonl（逐条）+ reports/results.json（汇总），有失败时退出码为 1
"""
import argparse
import sys
from pathlib import Path
from typing import List, Optional

from config.settings import load_settings
from data.data_reader import DataReader
from flows.runner import run_purchase_flows
from reporting.result_sink import ResultSink
from utils.exceptions import DataLoadError


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="saucedemo 完整下单流程，多账号并发运行")
    parser.add_argument("--data-dir", type=Path, default=None, help="测试数据目录（默认 data/test_data）")
    parser.add_argument("--format", choices=["json", "csv"], default="json", help="账号数据文件格式")
    parser.add_argument("--users", nargs="*", default=None, help="只运行这些账号类型，如 standard locked_out")
    parser.add_argument("--workers", type=int, default=None, help="并发数（默认取 MAX_WORKERS）")
    parser.add_argument("--headed", action="store_true", help="显示浏览器窗口")
    parser.add_argument("--reports-dir", type=Path, default=None, help="结果、日志、截图输出目录")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None, session_factory=None) -> int:
    args = parse_args(argv)

    settings = load_settings()
    overrides = {}
    if args.workers is not None:
        overrides["max_workers"] = args.workers
    if args.headed:
        overrides["headless"] = False
    if args.reports_dir is not None:
        overrides["reports_dir"] = args.reports_dir
    settings = settings.with_overrides(**overrides)

    reader = DataReader(args.data_dir)
    try:
        if args.format == "csv":
            credentials = reader.read_credentials_from_csv()
        else:
            credentials = reader.read_credentials_from_json()
        checkout_info = reader.read_checkout_info()
    except DataLoadError as err:
        print(f"测试数据加载失败：{err}", file=sys.stderr)
        return 2

    if args.users:
        credentials = [c for c in credentials if c.type in args.users]
        if not credentials:
            print(f"没有匹配的账号类型：{args.users}", file=sys.stderr)
            return 2

    sink = ResultSink(settings.reports_dir / "results.jsonl")
    kwargs = {"session_factory": session_factory} if session_factory is not None else {}
    run_purchase_flows(credentials, checkout_info, sink, settings, **kwargs)

    summary = sink.summary()
    path = sink.save_json(settings.reports_dir / "results.json")
    print(f"总数 {summary['total']}，通过 {summary['passed']}，失败 {summary['failed']}，"
          f"通过率 {summary['pass_rate']}% -> {path}")
    for record in sink.records():
        print(f"  [{record.status}] {record.scenario_name} ({record.username}) stage={record.stage}")
    return 0 if summary["failed"] == 0 else 1


if __name__ == "__main__":
    sys.exit(main())
