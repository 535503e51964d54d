from io import StringIO

from django.contrib.auth import get_user_model
from django.core.management import CommandError, call_command
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase
from rest_framework_simplejwt.tokens import RefreshToken

from payments.models import FeeTransfer
from .models import Group
from .tests import group_fields

User = get_user_model()


class RegistryAPITestCase(APITestCase):
    def setUp(self):
        self.authority = User.objects.create_user(
            email="authority@test.com",
            password="AuthPass123!",
            principal="ST1TEST",
            is_active=True,
            is_approved=True,
        )
        self.authority.grant_authority()
        self.member = User.objects.create_user(
            email="member@test.com",
            password="MemberPass123!",
            principal="ST3MEMBER",
            is_active=True,
            is_approved=True,
        )
        self.authenticate(self.authority)

    def authenticate(self, user):
        refresh = RefreshToken.for_user(user)
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {refresh.access_token}")

    def configure_authority(self, principal="ST2TEST"):
        return self.client.post(
            reverse("registry-authority"), {"principal": principal}, format="json"
        )

    def create_group(self, **overrides):
        return self.client.post(reverse("group-create"), group_fields(**overrides), format="json")


class GroupCreateAPITests(RegistryAPITestCase):
    def test_create_requires_authority_contract(self):
        response = self.create_group(name="NoAuth")

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertFalse(response.data["ok"])
        self.assertEqual(response.data["error"]["code"], 109)
        self.assertEqual(response.data["error"]["name"], "AuthorityNotVerified")

    def test_authority_creates_group_and_pays_fee(self):
        self.configure_authority()

        response = self.create_group()

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data, {"ok": True, "value": 0})
        self.assertEqual(Group.objects.get(pk=0).creator, "ST1TEST")

        transfer = FeeTransfer.objects.get()
        self.assertEqual((transfer.amount, transfer.payer, transfer.payee), (1000, "ST1TEST", "ST2TEST"))

    def test_member_without_authority_is_rejected(self):
        self.configure_authority()
        self.authenticate(self.member)

        response = self.create_group(name="Beta")

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data["error"]["code"], 100)

    def test_invalid_field_returns_its_error_code(self):
        self.configure_authority()

        response = self.create_group(name="InvalidMembers", max_members=51)

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"]["code"], 101)
        self.assertEqual(response.data["error"]["category"], "validation")

    def test_amount_beyond_column_range_returns_typed_error(self):
        self.configure_authority()

        response = self.create_group(contrib_amount=2**64)

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(response.data["ok"])
        self.assertEqual(response.data["error"]["code"], 102)
        self.assertFalse(Group.objects.exists())
        self.assertFalse(FeeTransfer.objects.exists())

    def test_duplicate_name_conflicts(self):
        self.configure_authority()
        self.create_group()

        response = self.create_group(location="CityY")

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data["error"]["code"], 106)

    def test_missing_fields_are_rejected_before_the_registry(self):
        self.configure_authority()

        response = self.client.post(reverse("group-create"), {"name": "Half"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("max_members", response.data)

    def test_caller_without_principal_is_forbidden(self):
        user = User.objects.create_user(
            email="noprincipal@test.com",
            password="NoPrincipal123!",
            is_active=True,
            is_approved=True,
        )
        self.authenticate(user)

        response = self.create_group()

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_unapproved_user_is_forbidden(self):
        user = User.objects.create_user(
            email="pending@test.com",
            password="Pending123!",
            principal="ST4PENDING",
            is_active=True,
            is_approved=False,
        )
        self.authenticate(user)

        response = self.client.get(reverse("group-count"))

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


class GroupReadUpdateAPITests(RegistryAPITestCase):
    def setUp(self):
        super().setUp()
        self.configure_authority()
        self.create_group()

    def test_get_group(self):
        response = self.client.get(reverse("group-detail", args=[0]))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data["ok"])
        self.assertEqual(response.data["value"]["name"], "Alpha")
        self.assertEqual(response.data["value"]["creator"], "ST1TEST")
        self.assertTrue(response.data["value"]["status"])

    def test_get_unknown_group_returns_404(self):
        response = self.client.get(reverse("group-detail", args=[42]))

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data["error"]["code"], 107)

    def test_creator_updates_group(self):
        response = self.client.put(
            reverse("group-detail", args=[0]),
            {"name": "NewName", "max_members": 15, "contrib_amount": 200},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["value"]["name"], "NewName")

        exists_url = reverse("group-exists")
        self.assertFalse(self.client.get(exists_url, {"name": "Alpha"}).data["value"])
        self.assertTrue(self.client.get(exists_url, {"name": "NewName"}).data["value"])

        last = self.client.get(reverse("group-last-update", args=[0])).data["value"]
        self.assertEqual(last["updater"], "ST1TEST")
        self.assertEqual(last["max_members"], 15)

    def test_update_beyond_column_range_returns_typed_error(self):
        response = self.client.put(
            reverse("group-detail", args=[0]),
            {"name": "Huge", "max_members": 15, "contrib_amount": 2**64},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"]["code"], 113)
        self.assertEqual(Group.objects.get(pk=0).contrib_amount, 100)

    def test_id_beyond_column_range_is_not_found(self):
        response = self.client.get(reverse("group-detail", args=[2**64]))

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data["error"]["code"], 107)

    def test_non_creator_cannot_update(self):
        self.authenticate(self.member)

        response = self.client.put(
            reverse("group-detail", args=[0]),
            {"name": "Hijack", "max_members": 15, "contrib_amount": 200},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data["error"]["code"], 100)
        self.assertEqual(Group.objects.get(pk=0).name, "Alpha")

    def test_last_update_is_null_before_any_update(self):
        response = self.client.get(reverse("group-last-update", args=[0]))

        self.assertEqual(response.data, {"ok": True, "value": None})

    def test_count_and_existence(self):
        self.create_group(name="Second")

        self.assertEqual(self.client.get(reverse("group-count")).data["value"], 2)
        self.assertTrue(
            self.client.get(reverse("group-exists"), {"name": "Second"}).data["value"]
        )

    def test_existence_requires_name(self):
        response = self.client.get(reverse("group-exists"))

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_authority_check(self):
        url = reverse("authority-check", args=["ST1TEST"])
        self.assertTrue(self.client.get(url).data["value"])

        url = reverse("authority-check", args=["ST3MEMBER"])
        self.assertFalse(self.client.get(url).data["value"])


class RegistryConfigAPITests(RegistryAPITestCase):
    def test_authority_contract_set_once(self):
        self.assertEqual(self.configure_authority().data, {"ok": True, "value": True})

        response = self.configure_authority("ST9OTHER")

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data["error"]["name"], "AlreadyConfigured")
        self.assertEqual(self.client.get(reverse("registry-authority")).data["value"], "ST2TEST")

    def test_null_principal_is_rejected(self):
        response = self.configure_authority("SP000000000000000000002Q6VF78")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"]["name"], "InvalidAuthority")

    def test_overlong_principal_is_rejected(self):
        response = self.configure_authority("S" + "T" * 200)

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("principal", response.data)
        self.assertIsNone(self.client.get(reverse("registry-authority")).data["value"])

    def test_fee_beyond_column_range_returns_typed_error(self):
        self.configure_authority()

        response = self.client.post(reverse("registry-fee"), {"fee": 2**64}, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"]["name"], "InvalidParam")
        self.assertEqual(self.client.get(reverse("registry-fee")).data["value"], 1000)

    def test_max_groups_beyond_column_range_returns_typed_error(self):
        self.configure_authority()

        response = self.client.post(
            reverse("registry-max-groups"), {"max_groups": 2**64}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"]["code"], 113)

    def test_fee_requires_configured_authority(self):
        response = self.client.post(reverse("registry-fee"), {"fee": 2000}, format="json")

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data["error"]["name"], "NotConfigured")

    def test_new_fee_applies_to_next_creation(self):
        self.configure_authority()
        self.client.post(reverse("registry-fee"), {"fee": 2000}, format="json")

        self.create_group()

        self.assertEqual(FeeTransfer.objects.get().amount, 2000)

    def test_max_groups_ceiling(self):
        self.configure_authority()
        self.client.post(reverse("registry-max-groups"), {"max_groups": 1}, format="json")
        self.create_group(name="Group1")

        response = self.create_group(name="Group2")

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data["error"]["code"], 114)

    def test_config_summary(self):
        self.configure_authority()

        response = self.client.get(reverse("registry-config"))

        self.assertEqual(
            response.data["value"],
            {
                "authority_contract": "ST2TEST",
                "creation_fee": 1000,
                "max_groups": 1000,
                "group_count": 0,
            },
        )


class ConfigureRegistryCommandTests(APITestCase):
    def test_command_sets_and_reports_configuration(self):
        out = StringIO()

        call_command("configure_registry", authority="ST2TEST", fee=300, max_groups=10, stdout=out)

        output = out.getvalue()
        self.assertIn("Authority contract: ST2TEST", output)
        self.assertIn("Creation fee: 300", output)
        self.assertIn("Max groups: 10", output)

    def test_command_reports_registry_errors(self):
        with self.assertRaises(CommandError):
            call_command("configure_registry", fee=300, stdout=StringIO())
