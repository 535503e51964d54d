from django.urls import path
from .views import FeeTransferListView

urlpatterns = [
    path("transfers/", FeeTransferListView.as_view(), name="fee-transfer-list"),
]
