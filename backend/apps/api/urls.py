from django.urls import include, path

from apps.catalog.views import CatalogRefreshView, ProductListView, ProductQuickView

urlpatterns = [
    path("catalog/refresh/", CatalogRefreshView.as_view(), name="api-catalog-refresh"),
    path("catalog/products/", ProductListView.as_view(), name="api-products-list"),
    path(
        "catalog/products/<int:product_id>/",
        ProductQuickView.as_view(),
        name="api-products-quick-view",
    ),
    path("cart/", include("apps.carts.urls")),
    path("preferences/", include("apps.preferences.urls")),
]
