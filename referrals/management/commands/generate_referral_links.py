from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand

from referrals.services import ReferralService


class Command(BaseCommand):
    help = 'Create or refresh the stored referral link for every user'

    def handle(self, *args, **kwargs):
        User = get_user_model()
        created_count = 0

        for user in User.objects.all():
            link, created = ReferralService.upsert_link(user)
            created_count += int(created)
            self.stdout.write(f"{user.email}: {link.referral_link}")

        self.stdout.write(self.style.SUCCESS(f"{created_count} links created, {User.objects.count() - created_count} refreshed"))
