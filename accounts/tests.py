from django.core.exceptions import ValidationError
from django.test import SimpleTestCase, TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase
from rest_framework_simplejwt.tokens import RefreshToken
from django.contrib.auth import get_user_model

from .models import AuditLog
from .oracles import StaticAuthorityOracle, UserAuthorityOracle
from .validators import validate_principal

User = get_user_model()


# -------------------------
# Registration Tests
# -------------------------
class RegistrationTests(APITestCase):

    def test_user_registration_creates_unapproved_user(self):
        url = reverse("register")
        data = {
            "email": "member1@test.com",
            "first_name": "Member",
            "last_name": "One",
            "principal": "ST1MEMBER",
            "password": "TestPass123!",
            "password2": "TestPass123!",
        }
        response = self.client.post(url, data)
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

        user = User.objects.get(email="member1@test.com")
        self.assertFalse(user.is_approved)
        self.assertFalse(user.is_authority)
        self.assertEqual(user.principal, "ST1MEMBER")

    def test_registration_requires_valid_principal(self):
        url = reverse("register")
        data = {
            "email": "member2@test.com",
            "principal": "not a principal",
            "password": "TestPass123!",
            "password2": "TestPass123!",
        }
        response = self.client.post(url, data)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("principal", response.data)


# -------------------------
# Login Restrictions Tests
# -------------------------
class LoginRestrictionTests(APITestCase):

    def test_login_fails_if_not_approved(self):
        User.objects.create_user(
            email="pending@test.com",
            password="pass123",
            is_approved=False,
        )
        url = reverse("login")
        response = self.client.post(url, {"email": "pending@test.com", "password": "pass123"})
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_login_returns_tokens_and_principal(self):
        User.objects.create_user(
            email="ok@test.com",
            password="pass123",
            principal="ST1OK",
            is_approved=True,
        )
        url = reverse("login")
        response = self.client.post(url, {"email": " OK@test.com ", "password": "pass123"})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn("access", response.data)
        self.assertEqual(response.data["principal"], "ST1OK")


# -------------------------
# Authority Verification Tests
# -------------------------
class AuthorityAdminTests(APITestCase):

    def setUp(self):
        self.admin = User.objects.create_user(
            email="admin@test.com",
            password="adminpass",
            role="ADMIN",
            is_approved=True,
        )
        self.user = User.objects.create_user(
            email="candidate@test.com",
            password="pass123",
            principal="ST1CANDIDATE",
            is_approved=True,
        )

        refresh = RefreshToken.for_user(self.admin)
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {refresh.access_token}")

    def test_admin_can_grant_authority(self):
        url = reverse("user-grant-authority", args=[self.user.id])
        response = self.client.post(url, {"notes": "KYC complete"})
        self.assertEqual(response.status_code, status.HTTP_200_OK)

        self.user.refresh_from_db()
        self.assertTrue(self.user.is_authority)
        self.assertEqual(self.user.role, "AUTHORITY")
        self.assertIsNotNone(self.user.authority_verified_at)
        self.assertTrue(UserAuthorityOracle().is_verified("ST1CANDIDATE"))

        log = AuditLog.objects.get(target_user=self.user)
        self.assertEqual(log.action, "AUTHORITY_GRANTED")
        self.assertEqual(log.actor, self.admin)
        self.assertEqual(log.notes, "KYC complete")

    def test_admin_can_revoke_authority(self):
        self.user.grant_authority(actor=self.admin)

        url = reverse("user-revoke-authority", args=[self.user.id])
        response = self.client.post(url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)

        self.user.refresh_from_db()
        self.assertFalse(self.user.is_authority)
        self.assertEqual(self.user.role, "MEMBER")
        self.assertFalse(UserAuthorityOracle().is_verified("ST1CANDIDATE"))

    def test_cannot_grant_authority_without_principal(self):
        user = User.objects.create_user(email="bare@test.com", password="pass123", is_approved=True)

        url = reverse("user-grant-authority", args=[user.id])
        response = self.client.post(url)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_admin_can_approve_user(self):
        pending = User.objects.create_user(email="pending2@test.com", password="pass123")

        url = reverse("user-approve", args=[pending.id])
        response = self.client.post(url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)

        pending.refresh_from_db()
        self.assertTrue(pending.is_approved)

    def test_member_cannot_grant_authority(self):
        refresh = RefreshToken.for_user(self.user)
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {refresh.access_token}")

        url = reverse("user-grant-authority", args=[self.user.id])
        response = self.client.post(url)
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        self.user.refresh_from_db()
        self.assertFalse(self.user.is_authority)

    def test_audit_log_listing(self):
        self.user.grant_authority(actor=self.admin)

        response = self.client.get(reverse("audit-logs"))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data[0]["target_principal"], "ST1CANDIDATE")


# -------------------------
# Profile Tests
# -------------------------
class ProfileTests(APITestCase):

    def test_principal_cannot_change_once_set(self):
        user = User.objects.create_user(
            email="p@test.com", password="pass123", principal="ST1FIXED", is_approved=True
        )
        self.client.force_authenticate(user=user)

        response = self.client.patch(reverse("profile"), {"principal": "ST1OTHER"})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_principal_can_be_added_later(self):
        user = User.objects.create_user(email="late@test.com", password="pass123")
        self.client.force_authenticate(user=user)

        response = self.client.patch(reverse("profile"), {"principal": "ST1LATE"})
        self.assertEqual(response.status_code, status.HTTP_200_OK)

        user.refresh_from_db()
        self.assertEqual(user.principal, "ST1LATE")


# -------------------------
# Oracle / Validator Tests
# -------------------------
class UserAuthorityOracleTests(TestCase):

    def test_only_approved_active_authorities_are_verified(self):
        user = User.objects.create_user(
            email="auth@test.com", password="pass123", principal="ST1AUTH", is_approved=True
        )
        oracle = UserAuthorityOracle()
        self.assertFalse(oracle.is_verified("ST1AUTH"))

        user.grant_authority()
        self.assertTrue(oracle.is_verified("ST1AUTH"))

        user.is_active = False
        user.save(update_fields=["is_active"])
        self.assertFalse(oracle.is_verified("ST1AUTH"))

    def test_unknown_or_empty_principal(self):
        oracle = UserAuthorityOracle()
        self.assertFalse(oracle.is_verified("ST1NOBODY"))
        self.assertFalse(oracle.is_verified(None))


class PrincipalValidatorTests(SimpleTestCase):

    def test_accepts_standard_and_contract_principals(self):
        for value in ["ST1TEST", "SP000000000000000000002Q6VF78", "ST2TEST.group-registry"]:
            with self.subTest(value=value):
                validate_principal(value)

    def test_rejects_malformed_principals(self):
        for value in ["", "st1test", "XT1TEST", "ST1TEST.", "ST1 TEST", "S" + "A" * 200]:
            with self.subTest(value=value):
                with self.assertRaises(ValidationError):
                    validate_principal(value)

    def test_static_oracle(self):
        oracle = StaticAuthorityOracle({"ST1TEST"})
        self.assertTrue(oracle.is_verified("ST1TEST"))
        self.assertFalse(oracle.is_verified("ST2TEST"))
