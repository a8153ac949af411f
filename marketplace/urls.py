from django.urls import include, path
from rest_framework.routers import DefaultRouter

from marketplace.catalog.api.views.gig_views import GigViewSet
from marketplace.ordering.api.views.order_views import OrderViewSet
from marketplace.reviews.api.views.review_views import ReviewViewSet

router = DefaultRouter()
router.register(r"gigs", GigViewSet, basename="gig")
router.register(r"orders", OrderViewSet, basename="order")
router.register(r"reviews", ReviewViewSet, basename="review")

app_name = "marketplace"

urlpatterns = [
    path("", include(router.urls)),
]
