from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.permissions import HasPrincipal, IsApprovedUser
from .serializers import (
    AuthorityContractSerializer,
    CreationFeeSerializer,
    GroupCreateSerializer,
    GroupSerializer,
    GroupUpdateRecordSerializer,
    GroupUpdateSerializer,
    MaxGroupsSerializer,
)
from .services import build_registry, logical_time


def ok(value, status_code=status.HTTP_200_OK):
    return Response({"ok": True, "value": value}, status=status_code)


class RegistryAPIView(APIView):
    """
    Base view for the registry endpoints. Registry errors propagate to
    ``groups.handlers.registry_exception_handler``.
    """

    permission_classes = [IsAuthenticated, IsApprovedUser]

    def get_registry(self):
        return build_registry()

    def get_caller(self):
        return self.request.user.principal


# =========================
# Groups
# =========================
class GroupCreateView(RegistryAPIView):
    permission_classes = [IsAuthenticated, IsApprovedUser, HasPrincipal]

    def post(self, request):
        serializer = GroupCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        group_id = self.get_registry().create_group(
            self.get_caller(),
            logical_time(),
            **serializer.validated_data,
        )
        return ok(group_id, status.HTTP_201_CREATED)


class GroupDetailView(RegistryAPIView):
    def get_permissions(self):
        permissions = super().get_permissions()
        if self.request.method == "PUT":
            permissions.append(HasPrincipal())
        return permissions

    def get(self, request, group_id):
        group = self.get_registry().get_group(group_id)
        return ok(GroupSerializer(group).data)

    def put(self, request, group_id):
        serializer = GroupUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        registry = self.get_registry()
        registry.update_group(
            self.get_caller(),
            logical_time(),
            group_id,
            serializer.validated_data["name"],
            serializer.validated_data["max_members"],
            serializer.validated_data["contrib_amount"],
        )
        return ok(GroupSerializer(registry.get_group(group_id)).data)


class GroupLastUpdateView(RegistryAPIView):
    def get(self, request, group_id):
        update = self.get_registry().get_group_update(group_id)
        return ok(GroupUpdateRecordSerializer(update).data if update else None)


class GroupCountView(RegistryAPIView):
    def get(self, request):
        return ok(self.get_registry().get_group_count())


class GroupExistenceView(RegistryAPIView):
    def get(self, request):
        name = request.query_params.get("name")
        if name is None:
            return Response(
                {"detail": "The 'name' query parameter is required."},
                status=status.HTTP_400_BAD_REQUEST,
            )
        return ok(self.get_registry().check_group_existence(name))


class AuthorityCheckView(RegistryAPIView):
    def get(self, request, principal):
        return ok(self.get_registry().is_verified_authority(principal))


# =========================
# Configuration
# =========================
class RegistryConfigView(RegistryAPIView):
    def get(self, request):
        registry = self.get_registry()
        return ok(
            {
                "authority_contract": registry.get_authority_contract(),
                "creation_fee": registry.get_creation_fee(),
                "max_groups": registry.get_max_groups(),
                "group_count": registry.get_group_count(),
            }
        )


class AuthorityContractView(RegistryAPIView):
    def get(self, request):
        return ok(self.get_registry().get_authority_contract())

    def post(self, request):
        serializer = AuthorityContractSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        return ok(
            self.get_registry().set_authority_contract(
                serializer.validated_data["principal"]
            )
        )


class CreationFeeView(RegistryAPIView):
    def get(self, request):
        return ok(self.get_registry().get_creation_fee())

    def post(self, request):
        serializer = CreationFeeSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        return ok(self.get_registry().set_creation_fee(serializer.validated_data["fee"]))


class MaxGroupsView(RegistryAPIView):
    def get(self, request):
        return ok(self.get_registry().get_max_groups())

    def post(self, request):
        serializer = MaxGroupsSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        return ok(
            self.get_registry().set_max_groups(serializer.validated_data["max_groups"])
        )
