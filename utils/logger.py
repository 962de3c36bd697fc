import logging
import re
from datetime import datetime
from pathlib import Path
from typing import List, Optional

SUCCESS = 25
logging.addLevelName(SUCCESS, "SUCCESS")

LEVELS = ("INFO", "ERROR", "WARNING", "SUCCESS", "DEBUG")

_FORMAT = "[%(asctime)s] [%(levelname)s] %(message)s"


class _BufferHandler(logging.Handler):
    """日志同时保存在内存里，运行结束后写进 RunRecord"""

    def __init__(self):
        super().__init__(logging.DEBUG)
        self.lines: List[str] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.lines.append(self.format(record))


class RunLogger:
    """
    一次流程运行一个 logger：
    - 不注册到 logging 全局 manager，避免并发运行互相串日志
    - console + 文件 + 内存 三路输出
    """

    def __init__(self, test_name: str, log_dir: Optional[Path] = None, console: bool = True):
        self.test_name = re.sub(r"\s+", "_", test_name)
        self._logger = logging.Logger(f"ui_flow.{self.test_name}", logging.DEBUG)
        formatter = logging.Formatter(_FORMAT)

        self._buffer = _BufferHandler()
        self._buffer.setFormatter(formatter)
        self._logger.addHandler(self._buffer)

        if console:
            ch = logging.StreamHandler()
            ch.setLevel(logging.INFO)
            ch.setFormatter(formatter)
            self._logger.addHandler(ch)

        self.log_file: Optional[Path] = None
        if log_dir is not None:
            log_dir = Path(log_dir)
            log_dir.mkdir(parents=True, exist_ok=True)
            timestamp = datetime.now().strftime("%Y-%m-%dT%H-%M-%S-%f")
            self.log_file = log_dir / f"{self.test_name}_{timestamp}.log"
            fh = logging.FileHandler(self.log_file, encoding="utf-8")
            fh.setLevel(logging.DEBUG)
            fh.setFormatter(formatter)
            self._logger.addHandler(fh)

    # ========= 各级别日志 =========
    def info(self, message: str):
        self._logger.info(message)

    def error(self, message: str, error: Optional[BaseException] = None):
        if error is not None:
            message = f"{message} - {error}"
        self._logger.error(message)

    def warning(self, message: str):
        self._logger.warning(message)

    def success(self, message: str):
        self._logger.log(SUCCESS, message)

    def debug(self, message: str):
        self._logger.debug(message)

    # ========= 日志读取 =========
    def get_logs(self) -> List[str]:
        return list(self._buffer.lines)

    def get_logs_by_level(self, level: str) -> List[str]:
        tag = f"[{level.upper()}]"
        return [line for line in self._buffer.lines if tag in line]

    def clear_logs(self):
        self._buffer.lines.clear()

    def save_to_file(self, filepath) -> Path:
        path = Path(filepath)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("\n".join(self._buffer.lines), encoding="utf-8")
        return path

    def close(self):
        """释放文件句柄，内存日志保留"""
        for handler in list(self._logger.handlers):
            if handler is self._buffer:
                continue
            handler.close()
            self._logger.removeHandler(handler)
