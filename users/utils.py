import base64
import secrets
import string
from io import BytesIO

import qrcode
from django.conf import settings
from django.core.mail import send_mail

REFERRAL_CODE_PREFIX = 'BDS'
REFERRAL_CODE_ALPHABET = string.ascii_uppercase + string.digits


def generate_referral_code():
    """BDS followed by 7 random uppercase letters/digits"""
    suffix = ''.join(secrets.choice(REFERRAL_CODE_ALPHABET) for _ in range(7))
    return f'{REFERRAL_CODE_PREFIX}{suffix}'


def generate_unique_referral_code():
    from .models import User

    referral_code = generate_referral_code()
    while User.objects.filter(referral_code=referral_code).exists():
        referral_code = generate_referral_code()
    return referral_code


def generate_reset_token():
    """Generate a random password reset token"""
    return secrets.token_hex(32)


def build_referral_link(referral_code):
    return f"{settings.REFERRAL_BASE_URL.rstrip('/')}/signup?ref={referral_code}"


def generate_qr_code(data):
    """Generate QR code image as base64 string"""
    qr = qrcode.QRCode(version=1, box_size=10, border=5)
    qr.add_data(data)
    qr.make(fit=True)
    img = qr.make_image(fill_color="black", back_color="white")

    buffer = BytesIO()
    img.save(buffer, format='PNG')
    buffer.seek(0)
    return base64.b64encode(buffer.getvalue()).decode()


def send_password_reset_email(user, token):
    """Send password reset link"""
    reset_link = f"{settings.FRONTEND_URL.rstrip('/')}/reset-password?token={token}"
    subject = 'Reset your BDS PRO password'
    message = f'''
    Hi {user.name},

    We received a request to reset your password. Use the link below to choose a new one:
    {reset_link}

    This link expires in one hour. If you didn't request a reset, you can ignore this email.

    Best regards,
    BDS PRO Team
    '''
    send_mail(
        subject,
        message,
        settings.DEFAULT_FROM_EMAIL,
        [user.email],
        fail_silently=False,
    )
