from django.urls import include, path
from rest_framework.routers import SimpleRouter

from .admin_views import AdminPaymentViewSet, TransactionProofViewSet
from .views import DepositViewSet, PaymentViewSet, TransactionViewSet, WithdrawalViewSet

router = SimpleRouter()
router.register(r'deposits', DepositViewSet, basename='deposit')
router.register(r'withdrawals', WithdrawalViewSet, basename='withdrawal')
router.register(r'payments', PaymentViewSet, basename='payment')
router.register(r'transactions', TransactionViewSet, basename='transaction')
router.register(r'admin/payments', AdminPaymentViewSet, basename='admin-payment')
router.register(r'admin/transaction-proofs', TransactionProofViewSet, basename='admin-transaction-proof')

urlpatterns = [
    path('', include(router.urls)),
]
