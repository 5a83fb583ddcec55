from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as DjangoUserAdmin

from .models import User


@admin.register(User)
class UserAdmin(DjangoUserAdmin):
    list_display = ['username', 'email', 'tenant', 'role', 'is_active']
    list_filter = ['role', 'is_active', 'tenant']
    fieldsets = DjangoUserAdmin.fieldsets + (
        ('Point of Sale', {'fields': ('tenant', 'role')}),
    )
