import logging

import django_filters
from django.conf import settings
from django.contrib.auth import get_user_model
from django.db.models import Count, Sum
from django.shortcuts import get_object_or_404
from rest_framework import filters, mixins, permissions, status, viewsets
from rest_framework.decorators import action
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.response import Response

from users.permissions import IsAdminUser

from .models import Deposit, Payment, SystemSettings, Transaction, Withdrawal
from .serializers import (
    DepositCreateSerializer, DepositSerializer, DepositUpdateSerializer,
    PaymentSerializer, PaymentSubmitSerializer, ProofUploadSerializer,
    TransactionSerializer, WithdrawalCreateSerializer, WithdrawalSerializer,
    WithdrawalStatusSerializer
)
from .services import DepositService, PaymentService, WithdrawalService

logger = logging.getLogger(__name__)

User = get_user_model()


class DepositFilter(django_filters.FilterSet):
    userId = django_filters.NumberFilter(field_name='user_id')

    class Meta:
        model = Deposit
        fields = ['status']


class DepositViewSet(mixins.ListModelMixin,
                     mixins.CreateModelMixin,
                     mixins.UpdateModelMixin,
                     mixins.DestroyModelMixin,
                     viewsets.GenericViewSet):
    serializer_class = DepositSerializer
    filter_backends = [django_filters.rest_framework.DjangoFilterBackend, filters.SearchFilter]
    filterset_class = DepositFilter
    search_fields = ['transaction_hash', 'user__name', 'user__email', 'wallet_address']

    def get_queryset(self):
        queryset = Deposit.objects.select_related('user')
        if self.request.user.is_staff:
            return queryset
        return queryset.filter(user=self.request.user)

    def get_permissions(self):
        if self.action in ('update', 'partial_update', 'destroy'):
            return [permissions.IsAuthenticated(), IsAdminUser()]
        return [permissions.IsAuthenticated()]

    def create(self, request, *args, **kwargs):
        serializer = DepositCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        user = request.user
        user_id = data.pop('user_id', None)
        if user_id is not None and request.user.is_staff:
            user = get_object_or_404(User, pk=user_id)

        deposit = Deposit.objects.create(user=user, **data)
        logger.info(f"Deposit {deposit.id} of {deposit.amount} USDT created for user {user.id}")

        return Response({
            'success': True,
            'message': 'Deposit created successfully',
            'data': DepositSerializer(deposit).data,
        }, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        deposit = self.get_object()
        serializer = DepositUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        deposit = DepositService.update(deposit.pk, serializer.validated_data)

        return Response({
            'success': True,
            'message': 'Deposit updated successfully',
            'data': DepositSerializer(deposit).data,
        })

    def destroy(self, request, *args, **kwargs):
        deposit = self.get_object()
        deposit_id = deposit.pk
        deposit.delete()
        logger.info(f"Deposit {deposit_id} deleted by admin {request.user.id}")
        return Response({'success': True, 'message': 'Deposit deleted successfully'})


class WithdrawalViewSet(mixins.ListModelMixin,
                        mixins.CreateModelMixin,
                        mixins.UpdateModelMixin,
                        viewsets.GenericViewSet):
    serializer_class = WithdrawalSerializer
    pagination_class = None
    filter_backends = []

    def get_queryset(self):
        queryset = Withdrawal.objects.select_related('user')
        if not self.request.user.is_staff:
            queryset = queryset.filter(user=self.request.user)

        status_filter = self.request.query_params.get('status')
        if status_filter and status_filter != 'all':
            queryset = queryset.filter(status=status_filter)
        return queryset

    def get_permissions(self):
        if self.action in ('update', 'partial_update'):
            return [permissions.IsAuthenticated(), IsAdminUser()]
        return [permissions.IsAuthenticated()]

    def list(self, request, *args, **kwargs):
        serializer = self.get_serializer(self.get_queryset(), many=True)
        return Response({'success': True, 'withdrawals': serializer.data})

    def create(self, request, *args, **kwargs):
        serializer = WithdrawalCreateSerializer(data=request.data, context={'request': request})
        serializer.is_valid(raise_exception=True)

        withdrawal = serializer.save(
            user=request.user,
            email=serializer.validated_data.get('email') or request.user.email,
        )
        logger.info(f"Withdrawal {withdrawal.id} of {withdrawal.amount} USDT requested by user {request.user.id}")

        return Response({
            'success': True,
            'message': 'Withdrawal request submitted successfully',
            'withdrawal': WithdrawalSerializer(withdrawal).data,
        }, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        withdrawal = self.get_object()
        serializer = WithdrawalStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        withdrawal = WithdrawalService.update_status(withdrawal.pk, serializer.validated_data['status'])

        return Response({
            'success': True,
            'message': f'Withdrawal {withdrawal.status} successfully',
            'withdrawal': WithdrawalSerializer(withdrawal).data,
        })


class PaymentViewSet(mixins.ListModelMixin,
                     mixins.CreateModelMixin,
                     viewsets.GenericViewSet):
    serializer_class = PaymentSerializer
    pagination_class = None
    filter_backends = []
    parser_classes = [MultiPartParser, FormParser, JSONParser]

    def get_queryset(self):
        user = self.request.user
        email = self.request.query_params.get('email')
        if user.is_staff and email:
            return Payment.objects.filter(email__iexact=email)
        return Payment.objects.filter(referred=user)

    def get_permissions(self):
        if self.action in ('create', 'payment_methods'):
            return [permissions.AllowAny()]
        return [permissions.IsAuthenticated()]

    def list(self, request, *args, **kwargs):
        serializer = self.get_serializer(self.get_queryset(), many=True)
        return Response({'success': True, 'payments': serializer.data})

    def create(self, request, *args, **kwargs):
        serializer = PaymentSubmitSerializer(data=request.data, context={'request': request})
        serializer.is_valid(raise_exception=True)
        payment = serializer.save()

        return Response({
            'success': True,
            'message': 'Payment submitted successfully. It will be reviewed by an admin.',
            'payment': PaymentSerializer(payment).data,
        }, status=status.HTTP_201_CREATED)

    @action(detail=False, methods=['get'], url_path='methods')
    def payment_methods(self, request):
        """Deposit addresses users should send USDT to."""
        addresses = settings.DEPOSIT_ADDRESSES
        data = [
            {
                'network': Payment.NETWORK_TRC20,
                'name': 'USDT (TRC20)',
                'address': SystemSettings.get_value('deposit_address_trc20', addresses['trc20']),
                'min_amount': settings.MIN_DEPOSIT_AMOUNT,
            },
            {
                'network': Payment.NETWORK_BEP20,
                'name': 'USDT (BEP20)',
                'address': SystemSettings.get_value('deposit_address_bep20', addresses['bep20']),
                'min_amount': settings.MIN_DEPOSIT_AMOUNT,
            },
        ]
        return Response({'success': True, 'methods': data})


class TransactionViewSet(mixins.ListModelMixin, viewsets.GenericViewSet):
    permission_classes = [permissions.IsAuthenticated]
    serializer_class = TransactionSerializer
    filter_backends = [django_filters.rest_framework.DjangoFilterBackend]
    filterset_fields = ['type']

    def get_queryset(self):
        return Transaction.objects.filter(user=self.request.user)

    @action(detail=False, methods=['get'], url_path='by-category')
    def by_category(self, request):
        rows = (
            Transaction.objects.filter(user=request.user)
            .values('type')
            .annotate(count=Count('id'), total=Sum('amount'))
            .order_by('type')
        )
        labels = dict(Transaction.TRANSACTION_TYPES)
        data = [
            {'type': row['type'], 'name': labels.get(row['type'], row['type']),
             'count': row['count'], 'total': row['total']}
            for row in rows
        ]
        return Response({'success': True, 'data': data})

    @action(detail=False, methods=['post'], url_path='upload-proof',
            parser_classes=[MultiPartParser, FormParser])
    def upload_proof(self, request):
        """Attach a deposit screenshot for the current user."""
        serializer = ProofUploadSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        user = request.user

        payment = Payment.objects.create(
            referred=user,
            referrer=user.referrer,
            image_url=PaymentService.store_proof_image(data['image'], prefix='proof'),
            transaction_hash=data['transaction_hash'],
            amount=data['amount'],
            full_name=user.name,
            email=user.email,
        )
        logger.info(f"Proof {payment.id} uploaded by user {user.id}")

        return Response({
            'success': True,
            'message': 'Transaction proof uploaded successfully',
            'data': PaymentSerializer(payment).data,
        }, status=status.HTTP_201_CREATED)
