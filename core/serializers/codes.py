from rest_framework import serializers

CATEGORIES = ['Ayurveda', 'Siddha', 'Unani']


class CodeSearchQuerySerializer(serializers.Serializer):
    q = serializers.CharField(required=False, allow_blank=True, max_length=128)
    category = serializers.ChoiceField(choices=CATEGORIES, required=False)
    limit = serializers.IntegerField(required=False, min_value=1, max_value=100, default=10)
