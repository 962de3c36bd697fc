from decimal import Decimal
import re

from utils.common_utils import amounts_match, format_money
from utils.exceptions import ValidationError

COMPLETE_KEYWORDS = ("complete", "thank you")


class CheckOutAssert:

    @staticmethod
    def tips_message(actual_msg: str, expect_msg: str):
        if expect_msg not in actual_msg:
            raise ValidationError(f"预期提示信息：{expect_msg}，不存在于{actual_msg}")

    @staticmethod
    def not_empty(column: str, name: str = "字段"):
        if not (column or "").strip():
            raise ValidationError(f"{name}为空！")

    @staticmethod
    def price_format(price: str):
        """只关心price格式，不关心具体 label 文案
           UI 改文案测试不炸"""
        if not re.match(r"^[A-Za-z ]+: \$\d+(\.\d{2})$", price):
            raise ValidationError(f"价格格式错误：{price}")

    @staticmethod
    def item_total(actual: Decimal, expect: Decimal):
        """页面 Item total = 购物车计算的小计"""
        if not amounts_match(actual, expect):
            raise ValidationError(f"商品总价错误：实际{format_money(actual)} != 预期{format_money(expect)}")

    @staticmethod
    def order_price(item_price: Decimal, tax: Decimal, order_price: Decimal):
        """订单总价 = 商品总价 + 税"""
        expect = item_price + tax
        if not amounts_match(order_price, expect):
            raise ValidationError(f"实际总金额{format_money(order_price)}!=预期总金额{format_money(expect)}")

    @staticmethod
    def product_count(actual: int, expect: int):
        if actual != expect:
            raise ValidationError(f"结算页面商品数量错误：{actual} != {expect}")

    @staticmethod
    def complete_message(message: str):
        lower = (message or "").lower()
        if not any(keyword in lower for keyword in COMPLETE_KEYWORDS):
            raise ValidationError(f"订单完成页面提示信息不符合预期：{message!r}")
