from django.contrib import admin
from .models import UserDesign


@admin.register(UserDesign)
class UserDesignAdmin(admin.ModelAdmin):
    list_display = ['user_full_name', 'user_email', 'user_phone', 'shower_type', 'created_at']
    list_filter = ['shower_type', 'created_at']
    search_fields = ['user_full_name', 'user_email', 'user_phone', 'user_postal_code']
    readonly_fields = ['created_at', 'updated_at']
    ordering = ['-created_at']
