from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    """Back-office administrator. Logs in with either email or username."""
    email = models.EmailField(unique=True)
    full_name = models.CharField(max_length=255, blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def save(self, *args, **kwargs):
        if self.email:
            self.email = self.email.strip().lower()
        super().save(*args, **kwargs)

    def __str__(self):
        return self.full_name or self.username

    class Meta:
        db_table = 'admins'


class PlumbingConfig(models.TextChoices):
    """Side of the shower the fixtures are plumbed on"""
    LEFT = 'LEFT', 'Left'
    RIGHT = 'RIGHT', 'Right'
    BOTH = 'BOTH', 'Both'


class TimestampedModel(models.Model):
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


DEFAULT_Z_INDEX = 50
