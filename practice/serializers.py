from rest_framework import serializers


class PracticeSubmitSerializer(serializers.Serializer):
    question_id = serializers.UUIDField()
    selected_option_id = serializers.UUIDField()
    time_spent_seconds = serializers.IntegerField(min_value=0, max_value=3600, required=False, default=0)
