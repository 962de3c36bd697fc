from decimal import Decimal
from typing import List

from data.models import CartItem, Product
from utils.common_utils import amounts_match, format_money
from utils.exceptions import ValidationError


class CartAssert:

    @staticmethod
    def cart_badge_count(actual: int, expect: int):
        """购物车图标显示数字"""
        if actual != expect:
            raise ValidationError(f"购物车角标显示的加购商品数量错误：{actual}!={expect}")

    @staticmethod
    def added_product_count(expected_products: List[Product], cart_items: List[CartItem]):
        """加购商品数量=购物车页商品数量？"""
        if len(expected_products) != len(cart_items):
            raise ValidationError(
                f"已加购商品数量{len(expected_products)} !=购物车页面商品数量 {len(cart_items)}")

    @staticmethod
    def product_in_cart(expected_products: List[Product], cart_items: List[CartItem]):
        """加购商品逐个在购物车里按 名称+价格 查找，不关心顺序"""
        for product in expected_products:
            if not any(item.name == product.name and item.price == product.price for item in cart_items):
                raise ValidationError(f"inventory加购的商品{product.name}({format_money(product.price)})，在购物车页面不存在")

    @staticmethod
    def subtotal(actual: Decimal, expect: Decimal):
        if not amounts_match(actual, expect):
            raise ValidationError(f"购物车小计错误：实际{format_money(actual)} != 预期{format_money(expect)}")
