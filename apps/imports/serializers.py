from django.conf import settings
from rest_framework import serializers


class BulkImportSerializer(serializers.Serializer):
    customers = serializers.ListField(child=serializers.DictField(), required=False)
    purchases = serializers.ListField(child=serializers.DictField(), required=False)
    campaigns = serializers.ListField(child=serializers.DictField(), required=False)
    performance = serializers.ListField(child=serializers.DictField(), required=False)

    def validate(self, data):
        if not any(data.get(name) for name in self.fields):
            raise serializers.ValidationError("Provide at least one non-empty dataset to import.")
        for name, records in data.items():
            if len(records) > settings.ANALYTICS_IMPORT_MAX_ROWS:
                raise serializers.ValidationError(
                    {name: f"Maximum {settings.ANALYTICS_IMPORT_MAX_ROWS:,} rows per import."}
                )
        return data
