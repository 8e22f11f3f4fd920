from rest_framework import serializers
from django.contrib.auth import get_user_model
from django.contrib.auth.password_validation import validate_password
from friendable.serializers import BaseSerializer
from .models import Organization
import logging

logger = logging.getLogger('friendable')
User = get_user_model()


class UserSerializer(BaseSerializer):
    """
    Serializer for the User model
    """
    class Meta:
        model = User
        fields = ['id', 'username', 'first_name', 'last_name', 'bio', 'date_joined']
        read_only_fields = ['id', 'date_joined']


class UserRegistrationSerializer(BaseSerializer):
    """
    Serializer for registering new users
    """
    password = serializers.CharField(write_only=True, required=True, style={'input_type': 'password'})
    password_confirm = serializers.CharField(write_only=True, required=True, style={'input_type': 'password'})

    class Meta:
        model = User
        fields = ['username', 'email', 'password', 'password_confirm', 'bio']

    def validate_email(self, value):
        """
        Validate that the email is unique (case insensitive).
        """
        if User.objects.filter(email__iexact=value).exists():
            raise serializers.ValidationError("A user with that email already exists.")
        return value.lower()

    def validate(self, attrs):
        if attrs['password'] != attrs['password_confirm']:
            raise serializers.ValidationError({"password": "Password fields don't match."})
        validate_password(attrs['password'])
        return attrs

    def create(self, validated_data):
        validated_data.pop('password_confirm')
        user = User.objects.create_user(**validated_data)
        logger.info(f"Registered user {user.username}")
        return user


class OrganizationSerializer(BaseSerializer):
    """
    Serializer for the Organization model
    """
    class Meta:
        model = Organization
        fields = ['id', 'name', 'slug', 'description', 'created_at']
        read_only_fields = ['id', 'slug', 'created_at']
