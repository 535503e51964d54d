from django.test import TestCase
from django.urls import reverse
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from accounts.models import User
from .models import FeeTransfer
from .sinks import LedgerPaymentSink, RecordingPaymentSink, TransferRecord


class PaymentSinkTests(TestCase):
    def test_ledger_sink_records_transfer(self):
        with self.assertLogs("payments.sinks", level="INFO") as logs:
            transfer = LedgerPaymentSink().transfer(1000, "ST1TEST", "ST2TEST", group_id=3)

        self.assertEqual(FeeTransfer.objects.get(), transfer)
        self.assertEqual(transfer.amount, 1000)
        self.assertEqual(transfer.group_id, 3)
        self.assertIn("Fee transfer of 1000 from ST1TEST to ST2TEST", logs.output[0])

    def test_recording_sink_keeps_transfers_in_order(self):
        sink = RecordingPaymentSink()
        sink.transfer(1000, "ST1TEST", "ST2TEST", group_id=0)
        sink.transfer(2000, "ST1TEST", "ST2TEST", group_id=1)

        self.assertEqual(
            sink.transfers,
            [
                TransferRecord(1000, "ST1TEST", "ST2TEST", 0),
                TransferRecord(2000, "ST1TEST", "ST2TEST", 1),
            ],
        )
        self.assertFalse(FeeTransfer.objects.exists())


class FeeTransferListTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.url = reverse("fee-transfer-list")

        FeeTransfer.objects.create(amount=1000, payer="ST1PAYER", payee="ST2TEST", group_id=0)
        FeeTransfer.objects.create(amount=1000, payer="ST1OTHER", payee="ST2TEST", group_id=1)

    def login(self, user):
        refresh = RefreshToken.for_user(user)
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {refresh.access_token}")

    def test_member_sees_only_own_transfers(self):
        self.login(
            User.objects.create_user(
                email="payer@test.com", password="pass123", principal="ST1PAYER", is_approved=True
            )
        )

        response = self.client.get(self.url)

        self.assertEqual(response.status_code, 200)
        self.assertEqual([t["payer"] for t in response.data], ["ST1PAYER"])

    def test_payee_sees_received_transfers(self):
        self.login(
            User.objects.create_user(
                email="payee@test.com", password="pass123", principal="ST2TEST", is_approved=True
            )
        )

        response = self.client.get(self.url, {"group": "1"})

        self.assertEqual([t["group_id"] for t in response.data], [1])

    def test_admin_sees_all_transfers(self):
        self.login(
            User.objects.create_user(
                email="admin@test.com", password="pass123", role="ADMIN", is_approved=True
            )
        )

        response = self.client.get(self.url)

        self.assertEqual(len(response.data), 2)

    def test_anonymous_request_is_rejected(self):
        response = self.client.get(self.url)

        self.assertEqual(response.status_code, 401)
