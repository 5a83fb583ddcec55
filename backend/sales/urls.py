from django.urls import path, include
from rest_framework import routers
from .views import SaleViewSet

app_name = "sales"

router = routers.DefaultRouter()
router.register(r"sales", SaleViewSet, basename="sale")

urlpatterns = [
    path("", include(router.urls)),
]
