import logging

from django.contrib.auth import get_user_model
from django.shortcuts import get_object_or_404
from rest_framework import permissions, status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from users.permissions import IsAdminUser
from users.utils import build_referral_link, generate_qr_code

from .models import Referral, ReferralLink
from .serializers import (
    GenerateLinkSerializer, ReferralLinkSerializer,
    ReferralSerializer, ReferralWriteSerializer
)
from .services import ReferralService

logger = logging.getLogger(__name__)

User = get_user_model()


class ReferralViewSet(viewsets.ModelViewSet):
    """Admin management of referral codes, plus each user's own link and network"""
    serializer_class = ReferralSerializer
    filterset_fields = ['status']
    search_fields = ['referral_code', 'user__name', 'user__email']
    lookup_value_regex = r'\d+'

    def get_queryset(self):
        return Referral.objects.select_related('user')

    def get_permissions(self):
        if self.action in ('link', 'generate_link', 'user_referrals'):
            return [permissions.IsAuthenticated()]
        return [permissions.IsAuthenticated(), IsAdminUser()]

    def retrieve(self, request, *args, **kwargs):
        return Response({'success': True, 'data': self.get_serializer(self.get_object()).data})

    def create(self, request, *args, **kwargs):
        serializer = ReferralWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        referral = serializer.save()
        logger.info(f"Referral code {referral.referral_code} created for user {referral.user_id}")

        return Response({
            'success': True,
            'message': 'Referral created successfully',
            'data': ReferralSerializer(referral).data,
        }, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        referral = self.get_object()
        serializer = ReferralWriteSerializer(referral, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        referral = serializer.save()

        return Response({
            'success': True,
            'message': 'Referral updated successfully',
            'data': ReferralSerializer(referral).data,
        })

    def destroy(self, request, *args, **kwargs):
        referral = self.get_object()
        referral.delete()
        return Response({'success': True, 'message': 'Referral deleted successfully'})

    @action(detail=False, methods=['get'])
    def link(self, request):
        user = request.user
        code = ReferralService.ensure_referral_code(user)
        referral_link = build_referral_link(code)

        return Response({
            'success': True,
            'data': {
                'referral_code': code,
                'referral_link': referral_link,
                'qr_code': f'data:image/png;base64,{generate_qr_code(referral_link)}',
            }
        })

    @action(detail=False, methods=['get', 'post'], url_path='generate-link')
    def generate_link(self, request):
        user = request.user

        if request.method == 'GET':
            link = ReferralLink.objects.filter(user=user).first()
            if link is None:
                return Response({'success': False, 'error': 'No referral link found. Generate one first.'},
                                status=status.HTTP_404_NOT_FOUND)
            return Response({'success': True, 'data': ReferralLinkSerializer(link).data})

        serializer = GenerateLinkSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        custom_code = (serializer.validated_data.get('custom_code') or '').strip()

        if custom_code and ReferralService.code_taken(custom_code, user):
            return Response({'success': False, 'error': 'This referral code is already taken'},
                            status=status.HTTP_400_BAD_REQUEST)

        link, created = ReferralService.upsert_link(user, custom_code or None)
        return Response({
            'success': True,
            'message': 'Referral link generated successfully' if created else 'Referral link updated successfully',
            'data': ReferralLinkSerializer(link).data,
        }, status=status.HTTP_201_CREATED if created else status.HTTP_200_OK)

    @action(detail=False, methods=['get'], url_path='user-referrals')
    def user_referrals(self, request):
        user = request.user
        user_id = request.query_params.get('userId')
        if user_id and request.user.is_staff:
            user = get_object_or_404(User, pk=user_id)

        level1, level2 = ReferralService.network(user)
        return Response({
            'success': True,
            'user': {
                'referral_code': user.referral_code,
                'referral_link': build_referral_link(user.referral_code) if user.referral_code else None,
            },
            'referrals': {
                'level1': ReferralService.describe_members(level1),
                'level2': ReferralService.describe_members(level2),
            }
        })

    @action(detail=False, methods=['get', 'post'], url_path='user-links')
    def user_links(self, request):
        if request.method == 'POST':
            if not request.data.get('generate_for_all'):
                return Response({'success': False, 'error': 'Nothing to do. Send generate_for_all to create links.'},
                                status=status.HTTP_400_BAD_REQUEST)
            users = User.objects.all()
            for user in users:
                ReferralService.upsert_link(user)
            count = users.count()
            logger.info(f"Referral links generated for {count} users by admin {request.user.id}")
            return Response({'success': True, 'message': f'Referral links generated for {count} users', 'generated': count})

        links = {link.user_id: link for link in ReferralLink.objects.all()}
        rows = []
        for user in User.objects.order_by('-created_at', '-id'):
            link = links.get(user.pk)
            rows.append({
                'user_id': user.pk,
                'name': user.name,
                'email': user.email,
                'referral_code': link.referral_code if link else user.referral_code,
                'referral_link': link.referral_link if link else (
                    build_referral_link(user.referral_code) if user.referral_code else None),
                'clicks': link.clicks if link else 0,
                'signups': link.signups if link else 0,
                'generated': link is not None,
                'created_at': user.created_at,
            })

        return Response({
            'success': True,
            'data': rows,
            'totals': {
                'total_users': len(rows),
                'generated_links': len(links),
                'total_clicks': sum(row['clicks'] for row in rows),
                'total_signups': sum(row['signups'] for row in rows),
            }
        })
