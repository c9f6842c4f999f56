from rest_framework import serializers

from .models import Notice


class NoticeSerializer(serializers.ModelSerializer):
    title = serializers.CharField(min_length=5, max_length=200)
    content = serializers.CharField(min_length=20)

    class Meta:
        model = Notice
        fields = [
            'id', 'title', 'content', 'publish_to', 'class_details',
            'published', 'draft_status', 'draft_error',
            'created_by', 'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'draft_status', 'draft_error', 'created_by', 'created_at', 'updated_at']

    def validate(self, attrs):
        publish_to = attrs.get('publish_to', getattr(self.instance, 'publish_to', Notice.Audience.ALL))
        class_details = attrs.get('class_details', getattr(self.instance, 'class_details', ''))
        if publish_to == Notice.Audience.CLASS and not (class_details or '').strip():
            raise serializers.ValidationError({'class_details': 'Укажите класс для объявления'})
        return attrs


class NoticeReadSerializer(serializers.ModelSerializer):
    """Объявление для учителей и учеников."""

    class Meta:
        model = Notice
        fields = ['id', 'title', 'content', 'publish_to', 'class_details', 'created_at']
        read_only_fields = fields


class NoticeGenerateSerializer(serializers.Serializer):
    """Запрос AI-черновика по заголовку и адресатам."""
    title = serializers.CharField(min_length=5, max_length=200)
    target_audience = serializers.ChoiceField(choices=Notice.Audience.choices)
    class_details = serializers.CharField(required=False, allow_blank=True, default='')
