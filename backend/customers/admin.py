from django.contrib import admin
from core_backend.admin.mixins import TenantAdminMixin

from .models import Customer


@admin.register(Customer)
class CustomerAdmin(TenantAdminMixin, admin.ModelAdmin):
    list_display = ['name', 'phone_number', 'email', 'created_at']
    search_fields = ['name', 'phone_number', 'email']
    readonly_fields = ['id', 'created_at', 'updated_at']
