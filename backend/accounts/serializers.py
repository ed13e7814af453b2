from rest_framework import serializers
from django.contrib.auth import authenticate
from .models import User


class UserSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = [
            "id",
            "username",
            "email",
            "role",
            "company_name",
            "phone_number",
            "locale",
        ]
        read_only_fields = ["id", "role"]


class LoginSerializer(serializers.Serializer):
    username = serializers.CharField()
    password = serializers.CharField(write_only=True)

    def validate(self, data):
        user = authenticate(username=data["username"], password=data["password"])
        if not user:
            raise serializers.ValidationError("Invalid username or password")
        return user


class RegisterSerializer(serializers.ModelSerializer):
    """Self-service registration creates customers only; staff accounts come from admin."""
    password = serializers.CharField(write_only=True)
    company_name = serializers.CharField()

    class Meta:
        model = User
        fields = ['username', 'password', 'email', 'company_name', 'phone_number', 'locale']

    def validate_email(self, value):
        if User.objects.filter(email=value).exists():
            raise serializers.ValidationError("Email already exists")
        return value

    def create(self, validated_data):
        return User.objects.create_user(
            username=validated_data['username'],
            email=validated_data.get('email', ''),
            password=validated_data['password'],
            role='customer',
            company_name=validated_data['company_name'],
            phone_number=validated_data.get('phone_number', ''),
            locale=validated_data.get('locale', 'de'),
        )
