"""测试数据读取：账号（JSON / CSV）、收货人信息（JSON）

数据文件缺失或格式错误时整个场景集直接失败（DataLoadError），不做部分运行。
"""
import csv
import json
from pathlib import Path
from typing import List, Optional

from data.models import CheckoutInfo, UserCredential
from utils.exceptions import DataLoadError

TEST_DATA_DIR = Path(__file__).parent / "test_data"

_USER_REQUIRED = ("username", "password", "type", "shouldSucceed")
_CHECKOUT_REQUIRED = ("firstName", "lastName", "postalCode")


def _as_bool(value, field: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "false"):
        return value.strip().lower() == "true"
    raise DataLoadError(f"字段 {field} 不是布尔值：{value!r}")


def _to_credential(row: dict, index: int) -> UserCredential:
    if not isinstance(row, dict):
        raise DataLoadError(f"第{index + 1}条账号数据格式错误：{row!r}")
    missing = [key for key in _USER_REQUIRED if row.get(key) is None]
    if missing:
        raise DataLoadError(f"第{index + 1}条账号数据缺少字段：{missing}")
    return UserCredential(
        username=str(row["username"]),
        password=str(row["password"]),
        type=str(row["type"]),
        should_succeed=_as_bool(row["shouldSucceed"], "shouldSucceed"),
        has_issues=_as_bool(row.get("hasIssues") or False, "hasIssues"),
        description=row.get("description") or None,
    )


def _read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except OSError as err:
        raise DataLoadError(f"测试数据文件读取失败：{path} - {err}") from err


class DataReader:

    def __init__(self, data_dir: Optional[Path] = None):
        self.data_dir = Path(data_dir) if data_dir is not None else TEST_DATA_DIR

    def read_credentials_from_json(self, filename: str = "credentials.json") -> List[UserCredential]:
        path = self.data_dir / filename
        try:
            data = json.loads(_read_text(path))
        except json.JSONDecodeError as err:
            raise DataLoadError(f"账号JSON格式错误：{path} - {err}") from err
        users = data.get("users") if isinstance(data, dict) else None
        if not isinstance(users, list) or not users:
            raise DataLoadError(f"账号JSON中没有 users 列表：{path}")
        return [_to_credential(row, i) for i, row in enumerate(users)]

    def read_credentials_from_csv(self, filename: str = "credentials.csv") -> List[UserCredential]:
        path = self.data_dir / filename
        reader = csv.DictReader(_read_text(path).splitlines())
        rows = [row for row in reader if any((v or "").strip() for v in row.values())]
        if not rows:
            raise DataLoadError(f"账号CSV为空：{path}")
        return [_to_credential(row, i) for i, row in enumerate(rows)]

    def read_checkout_info(self, filename: str = "checkout_info.json") -> CheckoutInfo:
        path = self.data_dir / filename
        try:
            data = json.loads(_read_text(path))
        except json.JSONDecodeError as err:
            raise DataLoadError(f"收货人信息JSON格式错误：{path} - {err}") from err
        if not isinstance(data, dict):
            raise DataLoadError(f"收货人信息格式错误：{path}")
        missing = [key for key in _CHECKOUT_REQUIRED if data.get(key) is None]
        if missing:
            raise DataLoadError(f"收货人信息缺少字段：{missing}")
        # 允许空字符串：负向用例需要故意留空的字段
        return CheckoutInfo(
            first_name=str(data["firstName"]),
            last_name=str(data["lastName"]),
            postal_code=str(data["postalCode"]),
            country=data.get("country"),
        )

    def get_user_by_type(self, user_type: str) -> Optional[UserCredential]:
        return next((u for u in self.read_credentials_from_json() if u.type == user_type), None)

    def get_valid_users(self) -> List[UserCredential]:
        return [u for u in self.read_credentials_from_json() if u.should_succeed]
