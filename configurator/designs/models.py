from django.db import models

from configurator.core.models import TimestampedModel


class UserDesign(TimestampedModel):
    """A customer's saved bathroom design. design_data is stored as-is."""
    user_full_name = models.CharField(max_length=255)
    user_email = models.EmailField(db_index=True)
    user_phone = models.CharField(max_length=30)
    user_postal_code = models.CharField(max_length=20)
    design_data = models.JSONField(default=dict)
    shower_type = models.ForeignKey('catalog.ShowerType', on_delete=models.PROTECT, related_name='user_designs')

    def save(self, *args, **kwargs):
        if self.user_email:
            self.user_email = self.user_email.strip().lower()
        super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.user_full_name} <{self.user_email}>"

    class Meta:
        db_table = 'user_designs'
        ordering = ['-created_at']
