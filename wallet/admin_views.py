from rest_framework import mixins, permissions, viewsets
from rest_framework.response import Response

from users.permissions import IsAdminUser

from .models import Payment
from .serializers import AdminPaymentSerializer, PaymentStatusSerializer, TransactionProofSerializer
from .services import PaymentService


class AdminPaymentViewSet(mixins.ListModelMixin,
                          mixins.UpdateModelMixin,
                          viewsets.GenericViewSet):
    """Review queue for submitted payment screenshots"""
    queryset = Payment.objects.select_related('referred', 'referrer')
    serializer_class = AdminPaymentSerializer
    permission_classes = [permissions.IsAuthenticated, IsAdminUser]
    pagination_class = None
    filter_backends = []
    list_key = 'payments'

    def list(self, request, *args, **kwargs):
        serializer = self.get_serializer(self.get_queryset(), many=True)
        return Response({'success': True, self.list_key: serializer.data})

    def update(self, request, *args, **kwargs):
        payment = self.get_object()
        serializer = PaymentStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        payment, credited = PaymentService.update_status(payment.pk, serializer.validated_data['status'])

        message = f'Payment status updated to {payment.status}'
        if credited:
            message += f' and {payment.amount} USDT credited to the user'
        return Response({
            'success': True,
            'message': message,
            'data': self.get_serializer(payment).data,
            'deposit_credited': credited,
        })


class TransactionProofViewSet(AdminPaymentViewSet):
    serializer_class = TransactionProofSerializer
    list_key = 'proofs'
