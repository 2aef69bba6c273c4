"""
Management command to store the USDT deposit addresses in SystemSettings
Usage: python manage.py setup_deposit_addresses [--trc20 ADDRESS] [--bep20 ADDRESS]
"""
from django.conf import settings
from django.core.management.base import BaseCommand

from wallet.models import SystemSettings


class Command(BaseCommand):
    help = 'Set up the TRC20/BEP20 deposit addresses shown on the payment methods screen'

    def add_arguments(self, parser):
        parser.add_argument('--trc20', type=str, default=settings.DEPOSIT_ADDRESSES['trc20'],
                            help='USDT TRC20 (Tron) deposit address')
        parser.add_argument('--bep20', type=str, default=settings.DEPOSIT_ADDRESSES['bep20'],
                            help='USDT BEP20 (BNB Smart Chain) deposit address')

    def handle(self, *args, **options):
        for network in ('trc20', 'bep20'):
            address = options[network]
            SystemSettings.objects.update_or_create(
                key=f'deposit_address_{network}',
                defaults={
                    'value': address,
                    'description': f'USDT {network.upper()} deposit address',
                }
            )
            self.stdout.write(self.style.SUCCESS(f'{network.upper()} deposit address set to {address}'))
