import logging
from dataclasses import dataclass
from typing import Optional

from groups.interfaces import PaymentSink
from .models import FeeTransfer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransferRecord:
    amount: int
    payer: str
    payee: str
    group_id: Optional[int] = None


class LedgerPaymentSink(PaymentSink):
    """
    Records each transfer as a ``FeeTransfer`` row. No value moves; the row
    is written in the caller's transaction and rolls back with it.
    """

    def transfer(self, amount, payer, payee, group_id=None):
        logger.info(f"Fee transfer of {amount} from {payer} to {payee} (group {group_id})")
        return FeeTransfer.objects.create(
            amount=amount,
            payer=payer,
            payee=payee,
            group_id=group_id,
        )


class RecordingPaymentSink(PaymentSink):
    def __init__(self):
        self.transfers = []

    def transfer(self, amount, payer, payee, group_id=None):
        logger.info(f"Fee transfer of {amount} from {payer} to {payee} (group {group_id})")
        record = TransferRecord(amount=amount, payer=payer, payee=payee, group_id=group_id)
        self.transfers.append(record)
        return record
