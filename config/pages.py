import os

from dotenv import load_dotenv

load_dotenv()

ENV = os.getenv("TEST_ENV", "prod")

URLS = {
    "prod": {
        "base": "https://www.saucedemo.com",
        "login": "https://www.saucedemo.com/",
        "inventory": "https://www.saucedemo.com/inventory.html",
        "cart": "https://www.saucedemo.com/cart.html",
    },
    "local": {
        "base": "http://localhost:3000",
        "login": "http://localhost:3000/",
        "inventory": "http://localhost:3000/inventory.html",
        "cart": "http://localhost:3000/cart.html",
    },
}

# 页面跳转后 url 校验用的正则片段
URL_PATTERNS = {
    "inventory": r"/inventory\.html",
    "cart": r"/cart\.html",
    "checkout_step_one": r"/checkout-step-one\.html",
    "checkout_step_two": r"/checkout-step-two\.html",
    "checkout_complete": r"/checkout-complete\.html",
}
