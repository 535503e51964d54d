from django.contrib.auth import get_user_model
from django.contrib.auth.password_validation import validate_password

from rest_framework import serializers

from .models import AuditLog

User = get_user_model()


# ====================================================
# REGISTRATION
# ====================================================
class RegisterSerializer(serializers.ModelSerializer):
    password2 = serializers.CharField(write_only=True)

    class Meta:
        model = User
        fields = (
            "email",
            "first_name",
            "last_name",
            "principal",
            "password",
            "password2",
        )
        extra_kwargs = {
            "password": {"write_only": True},
            "principal": {"required": True, "allow_null": False, "allow_blank": False},
        }

    def validate(self, attrs):
        if attrs["password"] != attrs["password2"]:
            raise serializers.ValidationError({"password": "Passwords do not match."})

        try:
            validate_password(attrs["password"])
        except Exception as e:
            raise serializers.ValidationError({"password": list(e.messages)})

        return attrs

    def create(self, validated_data):
        validated_data.pop("password2")

        return User.objects.create_user(
            email=validated_data["email"],
            first_name=validated_data.get("first_name", ""),
            last_name=validated_data.get("last_name", ""),
            principal=validated_data["principal"],
            password=validated_data["password"],
            role="MEMBER",
            is_approved=False,
        )


# ====================================================
# PROFILE / ADMINISTRATION
# ====================================================
class UserProfileSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = (
            "id",
            "email",
            "first_name",
            "last_name",
            "principal",
            "role",
            "is_superuser",
            "is_approved",
            "is_authority",
            "authority_verified_at",
        )
        read_only_fields = (
            "id",
            "email",
            "role",
            "is_superuser",
            "is_approved",
            "is_authority",
            "authority_verified_at",
        )

    def validate_principal(self, value):
        # Groups reference their creator by principal, so it cannot move
        current = getattr(self.instance, "principal", None)
        if current and value != current:
            raise serializers.ValidationError("Principal cannot be changed once set.")
        return value


class AuthorityActionSerializer(serializers.Serializer):
    notes = serializers.CharField(required=False, allow_blank=True, default="")


# ====================================================
# AUDIT LOGS
# ====================================================
class AuditLogSerializer(serializers.ModelSerializer):
    actor_email = serializers.CharField(source="actor.email", read_only=True, default=None)
    target_email = serializers.CharField(source="target_user.email", read_only=True)
    target_principal = serializers.CharField(source="target_user.principal", read_only=True)

    class Meta:
        model = AuditLog
        fields = (
            "id",
            "actor_email",
            "target_email",
            "target_principal",
            "action",
            "timestamp",
            "notes",
        )
