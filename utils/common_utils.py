from decimal import Decimal, InvalidOperation
import re

from utils.exceptions import ValidationError

"""字符串中获取价格、数量；金额容差比较"""

PRICE_TOLERANCE = Decimal("0.01")
CENT = Decimal("0.01")


def parse_money(text: str) -> Decimal:
    """
        从 'Item total: $39.98' 提取 Decimal('39.98')
        '$29.99' -> Decimal('29.99')
        '$1,299.99' -> Decimal('1299.99')
        金额后面还有数字（如 '$1,29.99'、'$12.5.0'）视为格式错误
        """
    text = text or ""
    match = re.search(r"\$?\s*((?:\d{1,3}(?:,\d{3})+|\d+)(?:\.\d+)?)", text)
    if not match or re.search(r"\d", text[match.end():]):
        raise ValidationError(f"无法从文本中解析金额：{text!r}")
    try:
        return Decimal(match.group(1).replace(",", ""))
    except InvalidOperation as err:
        raise ValidationError(f"无法从文本中解析金额：{text!r}") from err


def parse_quantity(text: str) -> int:
    """购物车数量：必须是 >=1 的整数"""
    value = (text or "").strip()
    if not value.isdigit() or int(value) < 1:
        raise ValidationError(f"购物车商品数量格式错误：{text!r}")
    return int(value)


def amounts_match(actual: Decimal, expect: Decimal, tolerance: Decimal = PRICE_TOLERANCE) -> bool:
    return abs(Decimal(actual) - Decimal(expect)) <= tolerance


def to_cents(amount: Decimal) -> Decimal:
    return Decimal(amount).quantize(CENT)


def format_money(amount: Decimal) -> str:
    return f"${to_cents(amount)}"
