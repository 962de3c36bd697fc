"""运行结果收集：每次流程运行结束时写入一条 RunRecord

多个流程可以并发运行，共享同一个 ResultSink：
- append 加锁，记录不会交错
- 同一个 run_id 只能写一次
"""
import json
import threading
import uuid
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Dict, List, Optional

PASSED = "PASSED"
FAILED = "FAILED"


@dataclass
class RunRecord:
    scenario_name: str
    username: str
    user_type: str
    status: str = PASSED
    stage: str = ""
    screenshots: List[Dict[str, str]] = field(default_factory=list)
    logs: List[str] = field(default_factory=list)
    error: Optional[str] = None
    start_time: str = ""
    end_time: str = ""
    duration: float = 0.0
    run_id: str = field(default_factory=lambda: uuid.uuid4().hex)

    def add_screenshot(self, step: str, path: str):
        self.screenshots.append({"step": step, "path": path})

    def to_dict(self) -> dict:
        return asdict(self)


class ResultSink:

    def __init__(self, output_file: Optional[Path] = None):
        self.output_file = Path(output_file) if output_file is not None else None
        self._lock = threading.Lock()
        self._records: List[RunRecord] = []
        self._run_ids = set()

    def append(self, record: RunRecord):
        with self._lock:
            if record.run_id in self._run_ids:
                raise ValueError(f"运行记录重复写入：{record.run_id} ({record.scenario_name})")
            self._run_ids.add(record.run_id)
            self._records.append(record)
            if self.output_file is not None:
                self.output_file.parent.mkdir(parents=True, exist_ok=True)
                with self.output_file.open("a", encoding="utf-8") as f:
                    f.write(json.dumps(record.to_dict(), ensure_ascii=False) + "\n")

    def records(self) -> List[RunRecord]:
        with self._lock:
            return list(self._records)

    def summary(self) -> dict:
        records = self.records()
        total = len(records)
        passed = sum(1 for r in records if r.status == PASSED)
        return {
            "total": total,
            "passed": passed,
            "failed": total - passed,
            "pass_rate": round(passed / total * 100, 2) if total else 0.0,
        }

    def save_json(self, path: Path) -> Path:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        payload = {"summary": self.summary(), "results": [r.to_dict() for r in self.records()]}
        path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
        return path
