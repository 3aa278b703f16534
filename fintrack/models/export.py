from typing import List, Optional

from pydantic import BaseModel

from fintrack.models.asset import Asset
from fintrack.models.budget import Budget
from fintrack.models.settings import UserSettings
from fintrack.models.transaction import Transaction


class ExportSnapshot(BaseModel):
    transactions: List[Transaction]
    budgets: List[Budget]
    settings: UserSettings
    assets: List[Asset]
    exported_at: Optional[str] = None
