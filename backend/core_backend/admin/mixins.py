from django.contrib import admin


class TenantAdminMixin:
    """
    The admin runs without a tenant in context, where TenantManager returns
    nothing. List every tenant's rows through all_objects instead and show
    which tenant each row belongs to.
    """

    def get_queryset(self, request):
        qs = self.model.all_objects.get_queryset()
        ordering = self.get_ordering(request)
        if ordering:
            qs = qs.order_by(*ordering)
        return qs

    def get_list_filter(self, request):
        list_filter = tuple(super().get_list_filter(request))
        if 'tenant' not in list_filter:
            list_filter = ('tenant',) + list_filter
        return list_filter


class TenantTabularInline(admin.TabularInline):
    """Inline that reads through all_objects; the parent FK does the filtering."""

    def get_queryset(self, request):
        return self.model.all_objects.get_queryset()
