import re
from decimal import Decimal
from typing import List

from utils.exceptions import ValidationError


class InventoryAssert:

    @staticmethod
    def product_count(actual_count: int, expect_count: int):
        if actual_count != expect_count:
            raise ValidationError(f"期望商品数量：{expect_count}，实际商品数量：{actual_count}")

    @staticmethod
    def enough_products(actual_count: int, expect_count: int):
        if actual_count < expect_count:
            raise ValidationError(f"商品数量不足：需要{expect_count}个，实际只有{actual_count}个")

    @staticmethod
    def column_not_empty(names: list):
        if not names:
            raise ValidationError("商品信息list为空")
        for name in names:
            if not (name or "").strip():
                raise ValidationError("存在商品信息为空")

    @staticmethod
    def product_price_format(prices: List[str]):
        if not prices:
            raise ValidationError("商品价格list为空")
        for price in prices:
            if not re.match(r"^\$\d+(\.\d{2})$", price):
                raise ValidationError(f"商品价格格式错误：{price}")

    @staticmethod
    def sort_asc(values: list):
        if values != sorted(values):
            raise ValidationError(f"未正序排列：{values}")

    @staticmethod
    def sort_desc(values: list):
        if values != sorted(values, reverse=True):
            raise ValidationError(f"未倒序排列：{values}")

    @staticmethod
    def prices_positive(prices: List[Decimal]):
        for price in prices:
            if price <= 0:
                raise ValidationError(f"价格必须大于 0: {price}")
