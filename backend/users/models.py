from django.contrib.auth.models import AbstractUser
from django.db import models
from django.utils.translation import gettext_lazy as _


class User(AbstractUser):
    """
    Staff account. Cashiers ring up sales at a register; the tenant they
    belong to scopes every sale and stock movement they create.
    """

    class Role(models.TextChoices):
        OWNER = "OWNER", _("Owner")
        MANAGER = "MANAGER", _("Manager")
        CASHIER = "CASHIER", _("Cashier")

    # Nullable so platform superusers can exist outside any tenant
    tenant = models.ForeignKey(
        'tenant.Tenant',
        on_delete=models.CASCADE,
        related_name='users',
        null=True,
        blank=True,
        help_text=_("The tenant this user belongs to")
    )
    role = models.CharField(
        _("role"), max_length=50, choices=Role.choices, default=Role.CASHIER
    )

    class Meta:
        indexes = [
            models.Index(fields=['tenant', 'role'], name='user_tenant_role_idx'),
        ]

    def __str__(self):
        return self.get_full_name() or self.username

    @property
    def is_cashier(self):
        return self.role == self.Role.CASHIER
