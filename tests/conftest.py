"""Pytest configuration and shared fixtures for all tests."""

from decimal import Decimal
from io import BytesIO

import pytest
from django.contrib.auth import get_user_model
from django.core.files.uploadedfile import SimpleUploadedFile
from PIL import Image
from rest_framework.test import APIClient

from referrals.models import Referral
from users.utils import generate_unique_referral_code
from users.views import issue_access_token

User = get_user_model()


@pytest.fixture(autouse=True)
def media_root(settings, tmp_path):
    """Keep uploaded proofs out of the project tree."""
    settings.MEDIA_ROOT = tmp_path / 'media'
    return settings.MEDIA_ROOT


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def make_user(db):
    """Factory for users with a referral code and a matching Referral row."""
    counter = {'n': 0}

    def _make(email=None, name=None, password='secret123', referrer=None,
              balance=Decimal('0.00'), is_staff=False):
        counter['n'] += 1
        user = User.objects.create_user(
            email=email or f"user{counter['n']}@example.com",
            password=password,
            name=name or f"User {counter['n']}",
            referral_code=generate_unique_referral_code(),
            referrer=referrer,
            account_balance=balance,
            is_staff=is_staff,
        )
        Referral.objects.create(user=user, referral_code=user.referral_code)
        return user

    return _make


@pytest.fixture
def user(make_user):
    return make_user(email='alice@example.com', name='Alice')


@pytest.fixture
def admin(make_user):
    return make_user(email='admin@example.com', name='Admin', is_staff=True)


@pytest.fixture
def client_for():
    """APIClient authenticated with a bearer token for the given user."""
    def _client(user):
        client = APIClient()
        client.credentials(HTTP_AUTHORIZATION=f'Bearer {issue_access_token(user)}')
        return client
    return _client


@pytest.fixture
def user_client(client_for, user):
    return client_for(user)


@pytest.fixture
def admin_client(client_for, admin):
    return client_for(admin)


@pytest.fixture
def image_upload():
    """Factory for an in-memory image upload."""
    def _upload(name='proof.png', image_format='PNG', content_type='image/png'):
        buffer = BytesIO()
        Image.new('RGB', (10, 10), color='white').save(buffer, format=image_format)
        return SimpleUploadedFile(name, buffer.getvalue(), content_type=content_type)
    return _upload
