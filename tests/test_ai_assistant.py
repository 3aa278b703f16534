import asyncio
import json
from datetime import date, datetime

from fintrack.core.config import settings
from fintrack.models.asset import Asset
from fintrack.models.budget import Budget
from fintrack.models.settings import UserSettings
from fintrack.models.transaction import Transaction
from fintrack.utils.ai_assistant import (
    CHAT_EMPTY_MESSAGE,
    CHAT_FAILURE_MESSAGE,
    QUICK_TIP_FALLBACK,
    AIFinancialAssistant,
)

TODAY = date.today()
CREATED = datetime(2025, 1, 1)

transactions = [
    Transaction(id=1, amount="2000.00", description="Salary", category="income", type="income", date=TODAY, created_at=CREATED),
    Transaction(id=2, amount="300.00", description="Groceries", category="food", type="expense", date=TODAY, created_at=CREATED),
    Transaction(id=3, amount="100.00", description="Bus pass", category="transport", type="expense", date=TODAY, created_at=CREATED),
]
budgets = [
    Budget(id=1, category="food", amount="200.00", spent="300.00", created_at=CREATED),
]
assets = [
    Asset(id=1, name="Laptop", type="electronics", value="1500.00", created_at=CREATED),
]


class FakeCompletion:
    """Records the prompts it receives and replies with a canned answer."""

    def __init__(self, reply="", error=None, delay=0.0):
        self.reply = reply
        self.error = error
        self.delay = delay
        self.calls = []

    async def __call__(self, messages, json_mode, max_tokens):
        self.calls.append({"messages": messages, "json_mode": json_mode, "max_tokens": max_tokens})
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error:
            raise self.error
        return self.reply


def run(coro):
    return asyncio.run(coro)


def test_insights_parsed_from_collaborator():
    reply = json.dumps({
        "insights": [
            {"type": "alert", "title": "Food over budget", "message": "Cut back on takeout.", "priority": "high"},
        ]
    })
    fake = FakeCompletion(reply)
    assistant = AIFinancialAssistant(complete=fake)

    insights = run(assistant.generate_insights(transactions, budgets))

    assert [i.title for i in insights] == ["Food over budget"]
    assert fake.calls[0]["json_mode"] is True


def test_insights_accept_fenced_json():
    reply = "```json\n" + json.dumps({"insights": []}) + "\n```"
    assistant = AIFinancialAssistant(complete=FakeCompletion(reply))
    assert run(assistant.generate_insights(transactions, budgets)) == []


def test_insights_prompt_embeds_totals_and_budget_usage():
    fake = FakeCompletion(json.dumps({"insights": []}))
    assistant = AIFinancialAssistant(complete=fake)
    run(assistant.generate_insights(transactions, budgets))

    prompt = fake.calls[0]["messages"][1]["content"]
    assert "Total Income: $2000.00" in prompt
    assert "Total Expenses: $400.00" in prompt
    assert "Net Savings: $1600.00" in prompt
    assert "- food: $300.00/$200.00 (150.0%)" in prompt


def test_insights_empty_when_collaborator_raises():
    assistant = AIFinancialAssistant(complete=FakeCompletion(error=RuntimeError("network down")))
    assert run(assistant.generate_insights(transactions, budgets)) == []


def test_insights_empty_on_malformed_output():
    assistant = AIFinancialAssistant(complete=FakeCompletion("not json at all"))
    assert run(assistant.generate_insights(transactions, budgets)) == []

    wrong_shape = json.dumps({"insights": [{"type": "bogus"}]})
    assistant = AIFinancialAssistant(complete=FakeCompletion(wrong_shape))
    assert run(assistant.generate_insights(transactions, budgets)) == []


def test_insights_empty_on_timeout():
    assistant = AIFinancialAssistant(complete=FakeCompletion("{}", delay=1.0), timeout=0.01)
    assert run(assistant.generate_insights(transactions, budgets)) == []


def test_chat_returns_collaborator_text():
    fake = FakeCompletion("  Spend less on food.  ")
    assistant = AIFinancialAssistant(complete=fake)

    reply = run(assistant.chat_with_assistant("How am I doing?", transactions, budgets))

    assert reply == "Spend less on food."
    user_message = fake.calls[0]["messages"][1]["content"]
    assert user_message.endswith("User Question: How am I doing?")
    assert "Active Budgets: 1" in user_message
    assert fake.calls[0]["json_mode"] is False


def test_chat_apologises_on_failure():
    assistant = AIFinancialAssistant(complete=FakeCompletion(error=ConnectionError("boom")))
    assert run(assistant.chat_with_assistant("hi", transactions, budgets)) == CHAT_FAILURE_MESSAGE


def test_chat_empty_reply():
    assistant = AIFinancialAssistant(complete=FakeCompletion(""))
    assert run(assistant.chat_with_assistant("hi", transactions, budgets)) == CHAT_EMPTY_MESSAGE


def test_comprehensive_tips_from_collaborator():
    tip = {
        "id": "cut-food",
        "title": "Cook at home",
        "description": "Plan meals for the week.",
        "category": "spending",
        "priority": "high",
        "actionable": True,
        "estimatedImpact": "$100/month",
        "timeframe": "1 month",
    }
    fake = FakeCompletion(json.dumps({"tips": [tip] * 10}))
    assistant = AIFinancialAssistant(complete=fake)

    tips = run(assistant.generate_comprehensive_tips(transactions, budgets, assets, UserSettings()))

    assert len(tips) == 8
    assert tips[0].estimated_impact == "$100/month"
    prompt = fake.calls[0]["messages"][1]["content"]
    assert "Total Net Worth: USD 1500.00" in prompt
    assert "Most Active Categories: food, transport" in prompt


def test_comprehensive_tips_fallback_flags_food_share():
    assistant = AIFinancialAssistant(complete=FakeCompletion(error=RuntimeError("down")))
    tips = run(assistant.generate_comprehensive_tips(transactions, budgets, assets, UserSettings()))
    assert [t.id for t in tips] == ["emergency-fund", "track-expenses", "automate-savings", "reduce-food-costs"]


def test_fallback_tips_without_food_heavy_spending():
    tips = AIFinancialAssistant.fallback_tips(transactions[2:])
    assert [t.id for t in tips] == ["emergency-fund", "track-expenses", "automate-savings"]
    assert AIFinancialAssistant.fallback_tips([]) == tips


def test_empty_tip_list_uses_fallback():
    assistant = AIFinancialAssistant(complete=FakeCompletion(json.dumps({"tips": []})))
    tips = run(assistant.generate_comprehensive_tips([], [], [], UserSettings()))
    assert len(tips) == 3


def test_quick_tip_and_fallback():
    assistant = AIFinancialAssistant(complete=FakeCompletion("Save 10% of each paycheck."))
    assert run(assistant.generate_quick_tip(transactions, budgets)) == "Save 10% of each paycheck."

    assistant = AIFinancialAssistant(complete=FakeCompletion(error=TimeoutError()))
    assert run(assistant.generate_quick_tip(transactions, budgets)) == QUICK_TIP_FALLBACK


def test_disabled_assistant_degrades(monkeypatch):
    monkeypatch.setattr(settings, "OPENAI_API_KEY", None)
    assistant = AIFinancialAssistant()
    assert not assistant.enabled
    assert run(assistant.generate_insights(transactions, budgets)) == []
    assert run(assistant.chat_with_assistant("hi", transactions, budgets)) == CHAT_FAILURE_MESSAGE
