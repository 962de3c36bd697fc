import time
from decimal import Decimal

import pytest

from config.pages import URLS, ENV
from data.checkout_data import CONTAINER_EMPTY_ERROR_MSG, CONTAINER_INFO, FINISH_PAGE_MESSAGE
from data.models import CheckoutInfo
from pages.cart_page import CartPage
from pages.checkout_complete_page import CheckoutCompletePage
from pages.checkout_overview_page import CheckoutOverviewPage
from pages.checkout_page import CheckoutPage
from pages.inventory_page import InventoryPage
from utils.exceptions import RequiredFieldError, ValidationError
from fake_shop import FakeShop

BACKPACK = "Sauce Labs Backpack"
JOHN = CheckoutInfo(CONTAINER_INFO["first_name"], CONTAINER_INFO["last_name"], CONTAINER_INFO["postal"])


def shop_at(fake_page, screen: str, cart=(BACKPACK,), **kwargs) -> FakeShop:
    shop = FakeShop(fake_page, **kwargs)
    shop.user = "standard_user"
    shop.cart = list(cart)
    getattr(shop, f"show_{screen}")()
    return shop


@pytest.fixture
def checkout_page(fake_page, run_logger, settings):
    return CheckoutPage(fake_page, run_logger, settings)


@pytest.fixture
def overview_page(fake_page, run_logger, settings):
    return CheckoutOverviewPage(fake_page, run_logger, settings)


@pytest.fixture
def complete_page(fake_page, run_logger, settings):
    return CheckoutCompletePage(fake_page, run_logger, settings)


class TestCheckoutStepOne:

    def test_submit_moves_to_overview(self, fake_page, checkout_page):
        shop = shop_at(fake_page, "checkout")
        checkout_page.submit_checkout_information(JOHN)
        assert shop.screen == "overview"

    def test_empty_postal_code(self, fake_page, checkout_page):
        shop = shop_at(fake_page, "checkout")
        with pytest.raises(RequiredFieldError) as exc:
            checkout_page.submit_checkout_information(CheckoutInfo("John", "Doe", ""))
        assert CONTAINER_EMPTY_ERROR_MSG["postal"] in str(exc.value)
        assert shop.screen == "checkout"
        assert checkout_page.has_required_field_error()

    def test_empty_form_reports_first_field(self, fake_page, checkout_page):
        shop_at(fake_page, "checkout")
        checkout_page.fill_checkout_information("", "", "")
        checkout_page.continue_checkout()
        checkout_page.verify_container_empty(CONTAINER_EMPTY_ERROR_MSG["first_name"])

    def test_cancel_returns_to_cart(self, fake_page, checkout_page):
        shop = shop_at(fake_page, "checkout")
        checkout_page.cancel()
        assert shop.screen == "cart"

    def test_no_error_message_when_clean(self, fake_page, checkout_page):
        shop_at(fake_page, "checkout")
        assert checkout_page.get_error_message() == ""
        assert not checkout_page.has_required_field_error()


class TestCheckoutOverview:

    def test_totals(self, fake_page, overview_page):
        shop_at(fake_page, "overview")
        overview_page.wait_until_settled()
        summary = overview_page.verify_order_totals(Decimal("29.99"))
        assert summary.item_total == Decimal("29.99")
        assert summary.tax == Decimal("2.40")
        assert summary.total == Decimal("32.39")
        assert summary.item_count == 1

    def test_total_not_item_total_plus_tax(self, fake_page, overview_page):
        shop_at(fake_page, "overview", total_offset="1.00")
        with pytest.raises(ValidationError):
            overview_page.verify_order_totals(Decimal("29.99"))

    def test_item_total_differs_from_cart_subtotal(self, fake_page, overview_page):
        shop_at(fake_page, "overview")
        with pytest.raises(ValidationError):
            overview_page.verify_order_totals(Decimal("79.98"))

    def test_item_count(self, fake_page, overview_page):
        shop_at(fake_page, "overview", cart=(BACKPACK, "Sauce Labs Onesie"))
        overview_page.verify_item_count(2)
        with pytest.raises(ValidationError):
            overview_page.verify_item_count(1)

    def test_base_info(self, fake_page, overview_page):
        shop_at(fake_page, "overview")
        overview_page.verify_order_base_info()

    def test_waits_for_summary_animation(self, fake_page, overview_page, settings):
        shop_at(fake_page, "overview", summary_settle_ms=150)
        start = time.monotonic()
        overview_page.wait_until_settled()
        assert time.monotonic() - start >= (150 + settings.stable_time) / 1000 * 0.9

    def test_finish(self, fake_page, overview_page):
        shop = shop_at(fake_page, "overview")
        overview_page.finish_checkout()
        assert shop.screen == "complete"
        assert shop.orders == 1


class TestCheckoutComplete:

    def test_verify_complete(self, fake_page, complete_page):
        shop_at(fake_page, "complete", cart=())
        complete_page.verify_checkout_complete()
        assert complete_page.is_pony_express_image_displayed()
        details = complete_page.get_order_confirmation_details()
        assert details["is_complete"] is True
        assert details["header"] == FINISH_PAGE_MESSAGE
        assert "dispatched" in details["description"]

    def test_not_on_complete_page(self, fake_page, complete_page):
        shop_at(fake_page, "overview")
        with pytest.raises(ValidationError):
            complete_page.verify_checkout_complete()
        assert complete_page.get_order_confirmation_details() == {
            "header": "", "description": "", "is_complete": False}

    def test_back_to_products(self, fake_page, complete_page):
        shop = shop_at(fake_page, "complete", cart=())
        complete_page.back_to_products()
        assert shop.screen == "inventory"


@pytest.mark.ui
@pytest.mark.need_login
class TestCheckOutUi:

    @pytest.fixture
    def at_step_one(self, page, ui_logger, ui_settings):
        """加购一件商品并进入 checkout-step-one"""
        inventory_page = InventoryPage(page, ui_logger, ui_settings)
        inventory_page.open_inventory(URLS[ENV]["inventory"])
        inventory_page.add_product_to_cart(inventory_page.get_most_expensive_products(1)[0].name)
        inventory_page.go_to_cart()
        cart_page = CartPage(page, ui_logger, ui_settings)
        cart_page.wait_until_loaded()
        subtotal = cart_page.calculate_subtotal()
        cart_page.proceed_to_checkout()
        return CheckoutPage(page, ui_logger, ui_settings), subtotal

    def test_step_one_container_empty(self, at_step_one):
        """验证checkout_step_one.html页面收货人空"""
        checkout_page, _ = at_step_one
        with pytest.raises(RequiredFieldError):
            checkout_page.submit_checkout_information(CheckoutInfo("", "", ""))
        checkout_page.verify_container_empty(CONTAINER_EMPTY_ERROR_MSG["first_name"])

    def test_finish_submit_order(self, at_step_one, page, ui_logger, ui_settings):
        """验证提交订单"""
        checkout_page, subtotal = at_step_one
        checkout_page.submit_checkout_information(JOHN)
        overview_page = CheckoutOverviewPage(page, ui_logger, ui_settings)
        overview_page.wait_until_settled()
        overview_page.verify_order_base_info()
        overview_page.verify_order_totals(subtotal)
        overview_page.finish_checkout()
        CheckoutCompletePage(page, ui_logger, ui_settings).verify_checkout_complete()
