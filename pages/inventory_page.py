from decimal import Decimal
from typing import List, Optional

from playwright.sync_api import Page

from assertions.cart_assert import CartAssert
from assertions.inventory_assert import InventoryAssert
from config.locators import INVENTORY_LOCATORS, nth, within
from config.settings import Settings
from data.models import Product
from pages.page_actions import PageActions
from utils.common_utils import parse_money, format_money
from utils.exceptions import ElementNotFoundError, OutOfStockError
from utils.logger import RunLogger

SORT_OPTIONS = ("az", "za", "lohi", "hilo")

# problem_user 的图片地址特征
BROKEN_IMAGE_MARKERS = ("WithGarbageOnItToBreakTheUrl", "/static/media/sl-404")


class InventoryPage:
    def __init__(self, page: Page, logger: RunLogger, settings: Optional[Settings] = None):
        self.actions = PageActions(page, logger, settings)
        self.logger = logger
        # 商品列表
        self.item_product = INVENTORY_LOCATORS["item_product"]

        # 商品明细
        self.item_product_name = INVENTORY_LOCATORS["item_product_name"]
        self.item_product_price = INVENTORY_LOCATORS["item_product_price"]
        self.item_product_desc = INVENTORY_LOCATORS["item_product_desc"]
        self.item_product_img = INVENTORY_LOCATORS["item_product_img"]
        self.add_product_button = INVENTORY_LOCATORS["add_product_button"]
        self.remove_product_button = INVENTORY_LOCATORS["remove_product_button"]

        # 排序下拉框、购物车
        self.product_sort_type = INVENTORY_LOCATORS["product_sort_type"]
        self.cart_badge = INVENTORY_LOCATORS["shopping_cart_badge"]
        self.cart_link = INVENTORY_LOCATORS["shopping_cart_link"]

    # ================= 页面行为 =================
    def open_inventory(self, inventory_url: str):
        self.actions.navigate(inventory_url)
        self.actions.waiter.wait_for_visible(self.item_product, self.actions.settings.default_timeout)

    def sort_products(self, sort_option: str):
        if sort_option not in SORT_OPTIONS:
            raise ValueError(f"不支持的排序方式：{sort_option}，可选：{SORT_OPTIONS}")
        self.actions.select_option(self.product_sort_type, sort_option)
        self.actions.delay()
        self.logger.info(f"商品按 {sort_option} 排序")

    def add_product_to_cart(self, product_name: str):
        """
        按名称加购：
        - 名称不存在 -> ElementNotFoundError
        - 商品存在但没有可用的 Add to cart 按钮 -> OutOfStockError
        """
        self.logger.info(f"加购商品：{product_name}")
        row = self._find_row(product_name)
        add_button = within(row, self.add_product_button)

        if self.actions.count(add_button) == 0 or not self.actions.is_enabled(add_button):
            self.logger.warning(f"商品 {product_name} 没有可用的加购按钮，可能已售罄")
            raise OutOfStockError(f"商品 {product_name} 无法加购（售罄）", add_button)

        self.actions.click(add_button)
        self.actions.delay()  # 加购动画
        self.logger.success(f"已加购 {product_name}")

    def remove_product_from_cart(self, product_name: str):
        self.logger.info(f"从商品列表页移除商品：{product_name}")
        row = self._find_row(product_name)
        self.actions.click(within(row, self.remove_product_button))
        self.actions.delay()
        self.logger.success(f"已移除 {product_name}")

    def go_to_cart(self):
        self.actions.click(self.cart_link)
        self.logger.info("进入购物车页面")

    # ================= 数据获取 =================
    def get_product_count(self) -> int:
        return self.actions.count(self.item_product)

    def get_all_products(self) -> List[Product]:
        """按页面顺序读取所有商品"""
        self.logger.info("读取商品列表")
        self.actions.waiter.wait_for_visible(self.item_product, self.actions.settings.default_timeout)

        products = []
        for i in range(self.actions.count(self.item_product)):
            row = nth(self.item_product, i)
            products.append(Product(
                name=self.actions.read_text(within(row, self.item_product_name)),
                price=parse_money(self.actions.read_text(within(row, self.item_product_price))),
                description=self.actions.read_text(within(row, self.item_product_desc)),
                index=i))

        self.logger.info(f"共 {len(products)} 个商品")
        return products

    def get_most_expensive_products(self, count: int = 2) -> List[Product]:
        """价格倒序取前 N 个；价格相同保持页面原顺序（sorted 是稳定排序）"""
        if count < 1:
            raise ValueError(f"商品数量必须 >= 1：{count}")
        products = sorted(self.get_all_products(), key=lambda p: p.price, reverse=True)[:count]
        self.logger.info("最贵的商品：" + ", ".join(f"{p.name} ({format_money(p.price)})" for p in products))
        return products

    def get_product_names(self) -> List[str]:
        return self.actions.read_texts(self.item_product_name)

    def get_product_prices(self) -> List[str]:
        return self.actions.read_texts(self.item_product_price)

    def get_product_prices_as_number(self) -> List[Decimal]:
        return [parse_money(p) for p in self.get_product_prices()]

    def get_cart_badge_count(self) -> int:
        # 购物车为空时角标不显示
        if self.actions.count(self.cart_badge) == 0:
            return 0
        text = self.actions.read_text(self.cart_badge)
        return int(text) if text.isdigit() else 0

    def check_for_broken_images(self) -> List[str]:
        srcs = self.actions.read_attributes(self.item_product_img, "src")
        broken = [src for src in srcs if src and any(marker in src for marker in BROKEN_IMAGE_MARKERS)]
        if broken:
            self.logger.warning(f"发现 {len(broken)} 张损坏的商品图片")
        return broken

    def is_product_in_cart(self, product_name: str) -> bool:
        try:
            row = self._find_row(product_name)
        except ElementNotFoundError:
            return False
        return self.actions.count(within(row, self.remove_product_button)) > 0

    def _find_row(self, product_name: str) -> str:
        """名称精确匹配（去首尾空格），返回该商品行的 selector"""
        for i in range(self.actions.count(self.item_product)):
            row = nth(self.item_product, i)
            if self.actions.read_text(within(row, self.item_product_name)) == product_name.strip():
                return row
        raise ElementNotFoundError(f"商品列表中不存在商品：{product_name}", self.item_product)

    # ========== 基础校验 ==========
    def verify_cart_badge_count(self, expected_count: int):
        CartAssert.cart_badge_count(self.get_cart_badge_count(), expected_count)
        self.logger.success(f"购物车角标数量正确：{expected_count}")

    def verify_base_info(self, expect_count: int):
        InventoryAssert.product_count(self.get_product_count(), expect_count)  # 商品数量一致
        InventoryAssert.column_not_empty(self.get_product_names())  # 商品名称非空
        InventoryAssert.product_price_format(self.get_product_prices())  # 商品价格格式
        InventoryAssert.prices_positive(self.get_product_prices_as_number())

    def verify_price_desc(self):
        InventoryAssert.sort_desc(self.get_product_prices_as_number())

    def verify_price_asc(self):
        InventoryAssert.sort_asc(self.get_product_prices_as_number())
