LOGIN_LOCATORS = {
    "username_input": "[data-test='username']",  # 用户名
    "password_input": "[data-test='password']",  # 用户密码
    "login_button": "[data-test='login-button']",  # 登录按钮
    "error_msg": "[data-test='error']",  # 登录错误提示信息
    "error_button": "[data-test='error-button']",  # 关闭错误提示的 x 按钮
    "login_logo": ".login_logo",  # 登录页logo
}

INVENTORY_LOCATORS = {
    "inventory_list": "[data-test='inventory-list']",  # 商品列表容器，登录成功的标志
    "item_product": "[data-test='inventory-item']",  # 商品列表
    "item_product_name": "[data-test='inventory-item-name']",  # 单商品名称
    "item_product_price": "[data-test='inventory-item-price']",  # 单商品价格
    "item_product_desc": "[data-test='inventory-item-desc']",  # 单商品描述
    "item_product_img": ".inventory_item_img img",  # 单商品图片
    "product_sort_type": "[data-test='product-sort-container']",  # 商品排序方式
    "add_product_button": "button[data-test^='add-to-cart']",  # 商品添加按钮
    "remove_product_button": "button[data-test^='remove']",  # 已加购商品按钮文字变为“Remove”
    "shopping_cart_badge": "[data-test='shopping-cart-badge']",  # 购物车显示商品数量
    "shopping_cart_link": "[data-test='shopping-cart-link']",  # 购物车icon
}

CART_LOCATORS = {
    "cart_item": ".cart_item",  # 购物车商品行
    "item_product_name": "[data-test='inventory-item-name']",  # 单商品名称
    "item_product_price": "[data-test='inventory-item-price']",  # 单商品价格
    "item_product_desc": "[data-test='inventory-item-desc']",  # 单商品描述
    "item_quantity": "[data-test='item-quantity']",  # 商品数量
    "remove_product_button": "button[data-test^='remove']",  # 删除按钮
    "checkout_button": "[data-test='checkout']",  # 结算按钮
    "continue": "[data-test='continue-shopping']",  # 继续购物按钮
    "title": "[data-test='title']",
}

CHECKOUT_LOCATORS = {
    # --------checkout-step-one.html---------
    "firstName_input": "[data-test='firstName']",  # firstName输入框
    "lastName_input": "[data-test='lastName']",  # lastName输入框
    "postalCode_input": "[data-test='postalCode']",  # postalCode输入框
    "container_error_msg": "[data-test='error']",  # 未填写收货人信息提交错误提示msg Error: First Name is required
    "cancel_button": "[data-test='cancel']",  # 取消按钮
    "continue_button": "[data-test='continue']",  # 继续按钮
}

OVERVIEW_LOCATORS = {
    # --------checkout-step-two.html---------
    "cart_item": ".cart_item",  # 订单确认页面商品列表
    "summary_info": ".summary_info",  # 价格汇总区块，页面加载时有位移动画
    "payment_information": "[data-test='payment-info-value']",  # 支付信息value
    "shipping_information": "[data-test='shipping-info-value']",  # 运费信息value
    "item_total": "[data-test='subtotal-label']",  # 商品价格
    "tax": "[data-test='tax-label']",  # 税费
    "total": "[data-test='total-label']",  # 订单价格
    "cancel_button": "[data-test='cancel']",  # 取消按钮
    "finish_button": "[data-test='finish']",  # 完成按钮
}

COMPLETE_LOCATORS = {
    # --------checkout-complete.html---------
    "complete_header": "[data-test='complete-header']",  # 完成页面提示信息
    "complete_text": "[data-test='complete-text']",  # 完成页面描述
    "back_home_button": "[data-test='back-to-products']",  # 返回商品列表
    "pony_express_img": "[data-test='pony-express']",
}


def nth(selector: str, index: int) -> str:
    """第 index 个匹配元素（Playwright >> nth= 链式写法）"""
    return f"{selector} >> nth={index}"


def within(parent: str, child: str) -> str:
    """在 parent 范围内查找 child"""
    return f"{parent} >> {child}"
