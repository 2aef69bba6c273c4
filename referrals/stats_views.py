from decimal import Decimal

from django.db.models import Sum
from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from wallet.models import Transaction
from wallet.serializers import TransactionSerializer

from .models import Commission
from .services import ReferralService


class DashboardViewSet(viewsets.ViewSet):
    permission_classes = [IsAuthenticated]

    @action(detail=False, methods=['get'], url_path='user-data')
    def user_data(self, request):
        user = request.user

        income = {
            row['level']: row['total']
            for row in Commission.objects.filter(user=user).values('level').annotate(total=Sum('amount'))
        }
        level1, level2 = ReferralService.network(user)
        level1_business = sum(
            ReferralService.investment_totals([member.pk for member in level1]).values(),
            Decimal('0.00'),
        )
        recent = Transaction.objects.filter(user=user)[:10]

        return Response({
            'success': True,
            'data': {
                'user_id': user.pk,
                'name': user.name,
                'email': user.email,
                'account_balance': user.account_balance,
                'total_earning': user.total_earning,
                'rewards': user.rewards,
                'referral_code': user.referral_code,
                'level1_income': income.get(1, Decimal('0.00')),
                'level2_income': income.get(2, Decimal('0.00')),
                'level1_business': level1_business,
                'direct_referrals': len(level1),
                'indirect_referrals': len(level2),
                'recent_transactions': TransactionSerializer(recent, many=True).data,
            }
        })
