from django.urls import path

from .views import CartCheckoutView, CartItemDetailView, CartItemsView, CartView

urlpatterns = [
    path("", CartView.as_view(), name="api-cart"),
    path("items/", CartItemsView.as_view(), name="api-cart-items"),
    path(
        "items/<int:product_id>/",
        CartItemDetailView.as_view(),
        name="api-cart-item-detail",
    ),
    path("checkout/", CartCheckoutView.as_view(), name="api-cart-checkout"),
]
