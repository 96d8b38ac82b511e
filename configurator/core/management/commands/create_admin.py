"""
Management command to create (or refresh) the back-office admin account
Usage: python manage.py create_admin [--email ...] [--username ...] [--password ...]
"""
from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand


class Command(BaseCommand):
    help = 'Creates the admin account, or updates it if the email is already registered'

    def add_arguments(self, parser):
        parser.add_argument('--email', default='admin@bathfitter.com')
        parser.add_argument('--username', default='admin')
        parser.add_argument('--password', default='Admin@123')
        parser.add_argument('--full-name', dest='full_name', default='Super Admin')

    def handle(self, *args, **options):
        User = get_user_model()
        email = options['email'].strip().lower()

        user, created = User.objects.get_or_create(
            email=email,
            defaults={'username': options['username'], 'full_name': options['full_name']},
        )
        user.is_staff = True
        user.is_superuser = True
        user.is_active = True
        user.set_password(options['password'])
        user.save()

        action = 'Created' if created else 'Updated'
        self.stdout.write(self.style.SUCCESS(f'{action} admin {user.username} <{user.email}>'))
