from typing import Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

Priority = Literal["high", "medium", "low"]


class FinancialInsight(BaseModel):
    type: Literal["alert", "tip", "achievement", "warning"]
    title: str
    message: str
    priority: Priority


class FinancialTip(BaseModel):
    id: str
    title: str
    description: str
    category: Literal["budgeting", "saving", "investing", "spending", "debt", "emergency"]
    priority: Priority
    actionable: bool = True
    estimated_impact: str = Field(validation_alias=AliasChoices("estimated_impact", "estimatedImpact"))
    timeframe: str


class ChatRequest(BaseModel):
    message: str = Field(min_length=1)

    model_config = ConfigDict(str_strip_whitespace=True)


class ChatResponse(BaseModel):
    response: str


class QuickTipResponse(BaseModel):
    tip: str
