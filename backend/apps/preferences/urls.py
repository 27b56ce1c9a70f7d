from django.urls import path

from .views import ThemeToggleView, ThemeView

urlpatterns = [
    path("theme/", ThemeView.as_view(), name="api-preferences-theme"),
    path("theme/toggle/", ThemeToggleView.as_view(), name="api-preferences-theme-toggle"),
]
