from rest_framework import serializers

from apps.api.schemas import NotificationSerializer


class CartLineSerializer(serializers.Serializer):
    productId = serializers.IntegerField(source="product_id")
    name = serializers.CharField()
    price = serializers.CharField()
    priceDisplay = serializers.CharField(source="price_display")
    quantity = serializers.IntegerField()
    lineTotal = serializers.CharField(source="line_total")
    lineTotalDisplay = serializers.CharField(source="line_total_display")
    imageUrl = serializers.CharField(source="image_url")
    canDecrement = serializers.BooleanField(source="can_decrement")


class CartReadSerializer(serializers.Serializer):
    lines = CartLineSerializer(many=True)
    itemCount = serializers.IntegerField(source="item_count")
    total = serializers.CharField()
    totalDisplay = serializers.CharField(source="total_display")
    isEmpty = serializers.BooleanField(source="is_empty")
    emptyMessage = serializers.CharField(source="empty_message", allow_blank=True)


class CheckoutSerializer(serializers.Serializer):
    itemCount = serializers.IntegerField(source="item_count")
    total = serializers.CharField()
    totalDisplay = serializers.CharField(source="total_display")
    message = serializers.CharField()


class CartResponseSerializer(serializers.Serializer):
    cart = CartReadSerializer()
    notifications = NotificationSerializer(many=True)


class CheckoutResponseSerializer(CartResponseSerializer):
    order = CheckoutSerializer()


class CartAddSerializer(serializers.Serializer):
    productId = serializers.IntegerField(min_value=0)


class CartQuantitySerializer(serializers.Serializer):
    # Zero or negative quantities remove the line.
    quantity = serializers.IntegerField()
