from rest_framework import serializers


class BaseModelSerializer(serializers.ModelSerializer):
    """
    Base serializer that provides common functionality.

    Declare `select_related_fields` / `prefetch_related_fields` on Meta and
    OptimizedQuerysetMixin applies them to the view's queryset.
    """

    class Meta:
        # Default optimization fields (can be overridden)
        select_related_fields = []
        prefetch_related_fields = []
