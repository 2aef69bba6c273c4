from django.urls import include, path
from rest_framework.routers import SimpleRouter

from .stats_views import DashboardViewSet
from .views import ReferralViewSet

router = SimpleRouter()
router.register(r'referrals', ReferralViewSet, basename='referral')
router.register(r'dashboard', DashboardViewSet, basename='dashboard')

urlpatterns = [
    path('', include(router.urls)),
]
