from django.contrib.auth import get_user_model
from rest_framework import serializers


User = get_user_model()


class UserSerializer(serializers.ModelSerializer):
    """Full account representation returned to the account owner."""

    class Meta:
        model = User
        fields = ["id", "name", "email", "role", "bio", "skills", "rating", "profile_pic", "date_joined"]
        read_only_fields = fields


class PublicUserSerializer(serializers.ModelSerializer):
    """What other users may see about an account."""

    class Meta:
        model = User
        fields = ["id", "name", "role", "bio", "skills", "rating", "profile_pic"]
        read_only_fields = fields


class UserSummarySerializer(serializers.ModelSerializer):
    """Compact user reference embedded in orders, messages and reviews."""

    class Meta:
        model = User
        fields = ["id", "name", "profile_pic"]
        read_only_fields = fields


class RegisterRequestSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=150)
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, style={"input_type": "password"})
    role = serializers.ChoiceField(choices=User.Role.choices)


class LoginRequestSerializer(serializers.Serializer):
    email = serializers.EmailField(help_text="User's email address")
    password = serializers.CharField(write_only=True, style={"input_type": "password"}, help_text="User's password")


class ProfileUpdateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=150, required=False)
    bio = serializers.CharField(required=False, allow_blank=True)
    skills = serializers.ListField(child=serializers.CharField(max_length=50), required=False)


class ProfilePictureUploadSerializer(serializers.Serializer):
    profile_pic = serializers.FileField()


class PasswordResetRequestSerializer(serializers.Serializer):
    email = serializers.EmailField()


class PasswordResetVerifySerializer(serializers.Serializer):
    email = serializers.EmailField()
    otp = serializers.CharField(min_length=6, max_length=6)
    new_password = serializers.CharField(write_only=True, style={"input_type": "password"})
