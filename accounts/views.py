import logging

# ====================================================
# DJANGO IMPORTS
# ====================================================
from django.contrib.auth import authenticate, get_user_model

# ====================================================
# DJANGO REST FRAMEWORK IMPORTS
# ====================================================
from rest_framework import generics, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

# ====================================================
# JWT IMPORTS
# ====================================================
from rest_framework_simplejwt.tokens import RefreshToken

# ====================================================
# LOCAL IMPORTS
# ====================================================
from .models import AuditLog
from .permissions import IsAdminOnly
from .serializers import (
    AuditLogSerializer,
    AuthorityActionSerializer,
    RegisterSerializer,
    UserProfileSerializer,
)

logger = logging.getLogger(__name__)
User = get_user_model()


# ====================================================
# USER REGISTRATION
# ====================================================
class RegisterView(generics.CreateAPIView):
    queryset = User.objects.all()
    serializer_class = RegisterSerializer
    permission_classes = [AllowAny]


# ====================================================
# LOGIN
# ====================================================
class LoginView(APIView):
    permission_classes = [AllowAny]

    def post(self, request):
        email = request.data.get("email")
        password = request.data.get("password")

        if isinstance(email, str):
            email = email.strip().lower()

        if not email or not password:
            return Response(
                {"error": "Email and password are required"},
                status=status.HTTP_400_BAD_REQUEST,
            )

        user = authenticate(request, email=email, password=password)

        if not user:
            return Response(
                {"error": "Invalid credentials"},
                status=status.HTTP_401_UNAUTHORIZED,
            )

        if not user.is_superuser and not user.is_approved:
            return Response(
                {"error": "Account is awaiting admin approval."},
                status=status.HTTP_403_FORBIDDEN,
            )

        refresh = RefreshToken.for_user(user)
        logger.info(f"User {user.email} logged in")

        return Response(
            {
                "access": str(refresh.access_token),
                "refresh": str(refresh),
                "role": user.role,
                "user_id": user.id,
                "principal": user.principal,
                "is_authority": user.is_authority,
            },
            status=status.HTTP_200_OK,
        )


# ====================================================
# PROFILE
# ====================================================
class ProfileView(generics.RetrieveUpdateAPIView):
    serializer_class = UserProfileSerializer
    permission_classes = [IsAuthenticated]
    http_method_names = ["get", "patch"]

    def get_object(self):
        return self.request.user


# ====================================================
# USER ADMIN / AUTHORITY VERIFICATION
# ====================================================
class UserViewSet(viewsets.ReadOnlyModelViewSet):
    permission_classes = [IsAuthenticated, IsAdminOnly]
    serializer_class = UserProfileSerializer

    def get_queryset(self):
        queryset = User.objects.all().order_by("-date_joined")
        if self.request.query_params.get("authority") == "true":
            queryset = queryset.filter(is_authority=True)
        return queryset

    @action(detail=True, methods=["post"])
    def approve(self, request, pk=None):
        user = self.get_object()
        user.approve_member(actor=request.user)
        logger.info(f"{request.user.email} approved {user.email}")
        return Response(UserProfileSerializer(user).data)

    @action(detail=True, methods=["post"], url_path="grant-authority")
    def grant_authority(self, request, pk=None):
        user = self.get_object()
        if not user.principal:
            return Response(
                {"detail": "User has no principal to verify."},
                status=status.HTTP_400_BAD_REQUEST,
            )
        if not user.is_approved:
            return Response(
                {"detail": "Only approved users can become authorities."},
                status=status.HTTP_400_BAD_REQUEST,
            )

        serializer = AuthorityActionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user.grant_authority(actor=request.user, notes=serializer.validated_data["notes"])
        logger.info(f"{request.user.email} granted authority to {user.principal}")
        return Response(UserProfileSerializer(user).data)

    @action(detail=True, methods=["post"], url_path="revoke-authority")
    def revoke_authority(self, request, pk=None):
        user = self.get_object()
        serializer = AuthorityActionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user.revoke_authority(actor=request.user, notes=serializer.validated_data["notes"])
        logger.info(f"{request.user.email} revoked authority of {user.principal}")
        return Response(UserProfileSerializer(user).data)


class AuditLogListView(generics.ListAPIView):
    queryset = AuditLog.objects.select_related("actor", "target_user")
    serializer_class = AuditLogSerializer
    permission_classes = [IsAuthenticated, IsAdminOnly]
