from dataclasses import dataclass, replace
from typing import Optional


@dataclass(frozen=True)
class GroupRecord:
    id: int
    name: str
    max_members: int
    contrib_amount: int
    cycle_duration: int
    penalty_rate: int
    voting_threshold: int
    group_type: str
    interest_rate: int
    grace_period: int
    location: str
    currency: str
    min_contrib: int
    max_loan: int
    status: bool
    creator: str
    created_at: int
    last_updated_at: int

    def renamed(self, name, max_members, contrib_amount, timestamp):
        """Copy with the mutable fields replaced; everything else is kept."""
        return replace(
            self,
            name=name,
            max_members=max_members,
            contrib_amount=contrib_amount,
            last_updated_at=timestamp,
        )


@dataclass(frozen=True)
class GroupUpdateRecord:
    group_id: int
    name: str
    max_members: int
    contrib_amount: int
    timestamp: int
    updater: str


@dataclass
class RegistryConfigRecord:
    next_group_id: int
    max_groups: int
    creation_fee: int
    authority_contract: Optional[str] = None
