from django.urls import path

from .views import ProductDetailView, ProductListView, ProductVariationsView, RevalidateView

app_name = "catalog"

urlpatterns = [
    path("products", ProductListView.as_view(), name="product-list"),
    path("products/<int:product_id>/variations", ProductVariationsView.as_view(), name="product-variations"),
    path("products/<str:id_or_slug>", ProductDetailView.as_view(), name="product-detail"),
    path("revalidate", RevalidateView.as_view(), name="revalidate"),
]
