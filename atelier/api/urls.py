"""
Atelier API URLs.

Include this in your project's urlpatterns:

    path('api/atelier/', include('atelier.api.urls')),
"""

from rest_framework.routers import DefaultRouter

from .views import ArtisanViewSet, ProductionOrderViewSet, StockLineViewSet

router = DefaultRouter()
router.register("stock-lines", StockLineViewSet)
router.register("artisans", ArtisanViewSet)
router.register("orders", ProductionOrderViewSet)

urlpatterns = router.urls
