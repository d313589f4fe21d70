from rest_framework import serializers


class SeasonPassCodeSerializer(serializers.Serializer):
    code = serializers.CharField(max_length=32, trim_whitespace=True)
