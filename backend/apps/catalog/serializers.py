from rest_framework import serializers

from apps.api.schemas import NotificationSerializer

from .commands import SORT_CHOICES


class ProductCardSerializer(serializers.Serializer):
    productId = serializers.IntegerField(source="product_id")
    name = serializers.CharField()
    price = serializers.CharField()
    priceDisplay = serializers.CharField(source="price_display")
    description = serializers.CharField()
    imageUrl = serializers.CharField(source="image_url")


class QuickViewSerializer(ProductCardSerializer):
    stockQuantity = serializers.IntegerField(source="stock_quantity")
    stockLabel = serializers.CharField(source="stock_label")


class ProductGridSerializer(serializers.Serializer):
    products = ProductCardSerializer(many=True)
    count = serializers.IntegerField()
    notifications = NotificationSerializer(many=True)


class QuickViewResponseSerializer(serializers.Serializer):
    product = QuickViewSerializer()
    notifications = NotificationSerializer(many=True)


class ProductFilterSerializer(serializers.Serializer):
    q = serializers.CharField(required=False, allow_blank=True, max_length=200)
    maxPrice = serializers.DecimalField(
        required=False, max_digits=12, decimal_places=2, min_value=0
    )
    sort = serializers.ChoiceField(choices=SORT_CHOICES, required=False)
