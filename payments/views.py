from django.db.models import Q
from rest_framework.generics import ListAPIView
from rest_framework.permissions import IsAuthenticated

from accounts.permissions import IsApprovedUser
from .models import FeeTransfer
from .serializers import FeeTransferSerializer


class FeeTransferListView(ListAPIView):
    """
    Admins see every transfer; other users see the transfers they paid or
    received.
    """

    serializer_class = FeeTransferSerializer
    permission_classes = [IsAuthenticated, IsApprovedUser]

    def get_queryset(self):
        user = self.request.user
        queryset = FeeTransfer.objects.all()

        if not (user.is_superuser or user.role == "ADMIN"):
            if not user.principal:
                return FeeTransfer.objects.none()
            queryset = queryset.filter(Q(payer=user.principal) | Q(payee=user.principal))

        group_id = self.request.query_params.get("group")
        if group_id is not None and group_id.isdigit():
            queryset = queryset.filter(group_id=int(group_id))

        return queryset
