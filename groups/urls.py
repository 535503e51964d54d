from django.urls import path
from .views import (
    AuthorityCheckView,
    AuthorityContractView,
    CreationFeeView,
    GroupCountView,
    GroupCreateView,
    GroupDetailView,
    GroupExistenceView,
    GroupLastUpdateView,
    MaxGroupsView,
    RegistryConfigView,
)

urlpatterns = [
    path("", GroupCreateView.as_view(), name="group-create"),
    path("count/", GroupCountView.as_view(), name="group-count"),
    path("exists/", GroupExistenceView.as_view(), name="group-exists"),
    path("<int:group_id>/", GroupDetailView.as_view(), name="group-detail"),
    path("<int:group_id>/last-update/", GroupLastUpdateView.as_view(), name="group-last-update"),
    path("authorities/<str:principal>/", AuthorityCheckView.as_view(), name="authority-check"),
    path("config/", RegistryConfigView.as_view(), name="registry-config"),
    path("config/authority/", AuthorityContractView.as_view(), name="registry-authority"),
    path("config/fee/", CreationFeeView.as_view(), name="registry-fee"),
    path("config/max-groups/", MaxGroupsView.as_view(), name="registry-max-groups"),
]
