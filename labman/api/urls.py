"""
Labman API URLs.

Include this in your project's urlpatterns:

    path('api/labman/', include('labman.api.urls')),
"""

from rest_framework.routers import DefaultRouter

from .views import (
    ClientViewSet,
    DashboardViewSet,
    EmployeeViewSet,
    InvoiceViewSet,
    OrderViewSet,
    ProductViewSet,
    RawMaterialViewSet,
)

router = DefaultRouter()
router.register("materials", RawMaterialViewSet)
router.register("products", ProductViewSet)
router.register("clients", ClientViewSet)
router.register("employees", EmployeeViewSet)
router.register("orders", OrderViewSet)
router.register("invoices", InvoiceViewSet)
router.register("dashboard", DashboardViewSet, basename="dashboard")

urlpatterns = router.urls
