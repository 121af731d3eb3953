from datetime import datetime
from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional


class PointsBalanceResponse(BaseModel):
    balance: int = Field(..., description="Current points total")


class PointsLedgerEntry(BaseModel):
    id: int
    delta_points: int
    balance_after: int
    source: str
    details: Dict[str, Any] = Field(default_factory=dict)
    ref_id: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class PointsLedgerResponse(BaseModel):
    balance: int
    entries: List[PointsLedgerEntry]
    total_count: int
    has_next: bool


class PointsTransactionResult(BaseModel):
    success: bool
    transaction_id: Optional[int] = None
    delta_points: int
    balance_after: int
    already_applied: bool = False
    message: str


class PointsIntegrityCheckResponse(BaseModel):
    status: str = Field(..., description="OK | MISMATCH")
    user_id: int
    ledger_sum: int
    profile_points: int
    latest_balance_after: int
    entry_count: int
    verified_at: str
