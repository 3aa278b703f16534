"""
AI financial assistant.

Builds prompts from the analyzer's figures and asks a chat-completion
collaborator (OpenAI by default) for insights, tips and chat replies. Every
collaborator failure (disabled, timeout, network, malformed output) is logged
and replaced by fallback content; nothing here raises to the caller.
"""
import asyncio
import json
import logging
from decimal import Decimal
from typing import Any, Awaitable, Callable, Dict, List, Optional

from openai import AsyncOpenAI
from pydantic import ValidationError as PydanticValidationError

from fintrack.core.config import settings
from fintrack.core.errors import ExternalServiceError
from fintrack.models.asset import Asset
from fintrack.models.budget import Budget
from fintrack.models.common import ZERO
from fintrack.models.insight import FinancialInsight, FinancialTip
from fintrack.models.settings import UserSettings
from fintrack.models.transaction import Category, Transaction, TransactionType
from fintrack.utils.analyzer import FinanceAnalyzer

logger = logging.getLogger(__name__)

# (messages, json_mode, max_tokens) -> completion text
CompletionFn = Callable[[List[Dict[str, str]], bool, int], Awaitable[str]]

CHAT_FAILURE_MESSAGE = "I'm experiencing technical difficulties. Please try again later."
CHAT_EMPTY_MESSAGE = "I'm sorry, I couldn't process your request. Please try again."
QUICK_TIP_FALLBACK = "Track your expenses daily to identify spending patterns and opportunities for savings."

INSIGHTS_SYSTEM_PROMPT = (
    "You are a personal finance advisor AI. Provide helpful, actionable "
    "financial insights based on user data."
)
CHAT_SYSTEM_PROMPT = (
    "You are a helpful personal finance assistant AI. Use the financial context "
    "provided to give personalized advice. Be friendly, concise, and actionable. "
    "Respond in plain text, not JSON."
)
TIPS_SYSTEM_PROMPT = """You are a professional financial advisor with expertise in personal finance, budgeting, and wealth building. Analyze the provided financial data and generate practical, actionable tips tailored to the user's specific situation.

Return a JSON object with this structure:
{
  "tips": [
    {
      "id": "unique_id",
      "title": "Brief, actionable title",
      "description": "Detailed explanation with specific steps",
      "category": "budgeting|saving|investing|spending|debt|emergency",
      "priority": "high|medium|low",
      "actionable": true,
      "estimated_impact": "Estimated financial impact",
      "timeframe": "How long to see results"
    }
  ]
}

Guidelines:
- Provide 5-8 personalized tips based on the data
- Include both short-term and long-term recommendations
- Address any concerning spending patterns
- Suggest realistic budget adjustments and savings strategies"""
QUICK_TIP_SYSTEM_PROMPT = (
    "You are a financial advisor. Generate a single, concise financial tip "
    "(max 100 words) based on the user's data. Be specific and actionable."
)

FALLBACK_TIPS: List[Dict[str, Any]] = [
    {
        "id": "emergency-fund",
        "title": "Build Emergency Fund",
        "description": "Aim to save 3-6 months of expenses in a high-yield savings account for unexpected costs.",
        "category": "emergency",
        "priority": "high",
        "actionable": True,
        "estimated_impact": "High financial security",
        "timeframe": "6-12 months",
    },
    {
        "id": "track-expenses",
        "title": "Monitor Daily Spending",
        "description": "Review your transactions weekly to identify spending patterns and potential savings.",
        "category": "budgeting",
        "priority": "medium",
        "actionable": True,
        "estimated_impact": "5-10% expense reduction",
        "timeframe": "1-2 weeks",
    },
    {
        "id": "automate-savings",
        "title": "Automate Your Savings",
        "description": "Set up automatic transfers to savings accounts to build wealth consistently.",
        "category": "saving",
        "priority": "medium",
        "actionable": True,
        "estimated_impact": "Increased savings rate",
        "timeframe": "Immediate",
    },
]
FOOD_TIP: Dict[str, Any] = {
    "id": "reduce-food-costs",
    "title": "Optimize Food Spending",
    "description": "Your food expenses are above 20% of total spending. Consider meal planning and cooking more at home.",
    "category": "spending",
    "priority": "medium",
    "actionable": True,
    "estimated_impact": "10-15% food cost reduction",
    "timeframe": "2-4 weeks",
}
FOOD_SHARE_THRESHOLD = Decimal("0.2")
MAX_TIPS = 8


class OpenAIChatClient:
    """Completion callable backed by the OpenAI chat completions API."""

    def __init__(self, api_key: str, model: str = settings.OPENAI_MODEL, timeout: float = settings.AI_TIMEOUT_SECONDS):
        self._client = AsyncOpenAI(api_key=api_key, timeout=timeout)
        self._model = model

    async def __call__(self, messages: List[Dict[str, str]], json_mode: bool, max_tokens: int) -> str:
        kwargs: Dict[str, Any] = {}
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}
        response = await self._client.chat.completions.create(
            model=self._model,
            messages=messages,
            max_tokens=max_tokens,
            **kwargs,
        )
        return response.choices[0].message.content or ""

    async def close(self) -> None:
        await self._client.close()


def _strip_code_fence(text: str) -> str:
    text = text.strip()
    if text.startswith("```"):
        lines = text.split("\n")[1:]
        if lines and lines[-1].strip().startswith("```"):
            lines = lines[:-1]
        text = "\n".join(lines).strip()
    return text


class AIFinancialAssistant:
    def __init__(
        self,
        complete: Optional[CompletionFn] = None,
        analyzer: Optional[FinanceAnalyzer] = None,
        timeout: float = settings.AI_TIMEOUT_SECONDS,
    ) -> None:
        if complete is None and settings.OPENAI_API_KEY:
            complete = OpenAIChatClient(settings.OPENAI_API_KEY)
        if complete is None:
            logger.warning("No OPENAI_API_KEY configured, AI features will use fallback content")
        self._complete = complete
        self._analyzer = analyzer or FinanceAnalyzer()
        self._timeout = timeout

    @property
    def enabled(self) -> bool:
        return self._complete is not None

    async def close(self) -> None:
        close = getattr(self._complete, "close", None)
        if close is not None:
            await close()

    def _log_failure(self, what: str, error: ExternalServiceError) -> None:
        if not self.enabled:
            logger.warning(f"{what}: {error}, using fallback content")
        else:
            logger.error(f"{what}: {error}", exc_info=True)

    async def _ask(self, system: str, user: str, json_mode: bool, max_tokens: int) -> str:
        if self._complete is None:
            raise ExternalServiceError("AI assistant is not configured")

        messages = [
            {"role": "system", "content": system},
            {"role": "user", "content": user},
        ]
        try:
            return await asyncio.wait_for(
                self._complete(messages, json_mode, max_tokens),
                timeout=self._timeout,
            )
        except asyncio.TimeoutError as e:
            raise ExternalServiceError(f"AI request timed out after {self._timeout}s") from e
        except Exception as e:
            raise ExternalServiceError(f"AI request failed: {e}") from e

    async def _ask_json(self, system: str, user: str, max_tokens: int) -> Dict[str, Any]:
        content = await self._ask(system, user, json_mode=True, max_tokens=max_tokens)
        try:
            result = json.loads(_strip_code_fence(content or "{}"))
        except json.JSONDecodeError as e:
            logger.warning(f"AI returned malformed JSON: {content[:200]!r}")
            raise ExternalServiceError("AI returned malformed JSON") from e
        if not isinstance(result, dict):
            raise ExternalServiceError("AI returned a non-object JSON payload")
        return result

    # Prompts

    def build_insights_prompt(self, transactions: List[Transaction], budgets: List[Budget]) -> str:
        totals = self._analyzer.monthly_totals(transactions)
        status = self._analyzer.budget_status(budgets)
        top = self._analyzer.top_categories(transactions)

        budget_lines = "\n".join(
            f"- {b.category.value}: ${b.spent}/${b.amount} ({b.percentage_used:.1f}%)" for b in status
        ) or "- No budgets set"
        category_lines = "\n".join(
            f"- {c.category}: ${c.amount} ({c.percentage}%)" for c in top
        ) or "- No expenses this month"

        return f"""Analyze the following financial data and provide 2-3 actionable insights:

Financial Summary:
- Total Income: ${totals.total_income}
- Total Expenses: ${totals.total_expenses}
- Net Savings: ${totals.net_savings}

Budget Status:
{budget_lines}

Top Spending Categories:
{category_lines}

Provide insights in JSON format with this structure:
{{
  "insights": [
    {{
      "type": "alert|tip|achievement|warning",
      "title": "Brief title",
      "message": "Actionable advice under 100 words",
      "priority": "high|medium|low"
    }}
  ]
}}

Focus on:
- Budget overruns and recommendations
- Saving opportunities
- Spending pattern improvements
- Achievement recognition for good habits"""

    def build_chat_context(self, transactions: List[Transaction], budgets: List[Budget]) -> str:
        totals = self._analyzer.monthly_totals(transactions)
        budget_lines = "\n".join(f"- {b.category.value}: ${b.spent}/${b.amount}" for b in budgets)

        return f"""User's Financial Context:
- Total Income: ${totals.total_income}
- Total Expenses: ${totals.total_expenses}
- Net Savings: ${totals.net_savings}
- Active Budgets: {len(budgets)}
- Recent Transactions: {len(transactions[:10])}

Budget Status:
{budget_lines or "- No budgets set"}"""

    def build_tips_prompt(
        self,
        transactions: List[Transaction],
        budgets: List[Budget],
        assets: List[Asset],
        user_settings: UserSettings,
    ) -> str:
        currency = user_settings.currency
        income = sum((t.amount for t in transactions if t.type == TransactionType.INCOME), ZERO)
        expenses = sum((t.amount for t in transactions if t.is_expense), ZERO)
        savings_rate = (income - expenses) / income * 100 if income else ZERO
        net_worth = self._analyzer.net_worth(assets, currency)

        spending: Dict[str, Any] = {}
        for t in transactions:
            if t.is_expense:
                spending[t.category.value] = spending.get(t.category.value, ZERO) + t.amount
        ranked = sorted(spending.items(), key=lambda item: item[1], reverse=True)

        spending_lines = "\n".join(f"- {c}: {currency} {a:.2f}" for c, a in ranked) or "- No expenses recorded"
        budget_lines = "\n".join(
            f"- {b.category.value}: {b.percentage_used:.1f}% used ({currency} {b.spent}/{currency} {b.amount})"
            for b in self._analyzer.budget_status(budgets)
        ) or "- No budgets set"

        return f"""FINANCIAL PROFILE ANALYSIS:

INCOME & EXPENSES:
- Total Recorded Income: {currency} {income:.2f}
- Total Recorded Expenses: {currency} {expenses:.2f}
- Net Cash Flow: {currency} {income - expenses:.2f}
- Savings Rate: {savings_rate:.1f}%

ASSET PORTFOLIO:
- Total Net Worth: {currency} {net_worth:.2f}
- Number of Assets: {len(assets)}
- Asset Types: {", ".join(a.type.value for a in assets) or "None"}

SPENDING BREAKDOWN:
{spending_lines}

BUDGET PERFORMANCE:
{budget_lines}

RECENT TRANSACTION PATTERNS:
- Total Transactions: {len(transactions)}
- Most Active Categories: {", ".join(c for c, _ in ranked[:3]) or "None"}

Please analyze this financial profile and provide personalized recommendations for improvement."""

    # Operations

    async def generate_insights(self, transactions: List[Transaction], budgets: List[Budget]) -> List[FinancialInsight]:
        try:
            prompt = self.build_insights_prompt(transactions, budgets)
            result = await self._ask_json(INSIGHTS_SYSTEM_PROMPT, prompt, settings.AI_MAX_TOKENS)
            try:
                return [FinancialInsight.model_validate(item) for item in result.get("insights") or []]
            except (PydanticValidationError, TypeError) as e:
                raise ExternalServiceError("AI returned insights in an unexpected shape") from e
        except ExternalServiceError as e:
            self._log_failure("Error generating AI insights", e)
            return []

    async def chat_with_assistant(self, message: str, transactions: List[Transaction], budgets: List[Budget]) -> str:
        try:
            context = self.build_chat_context(transactions, budgets)
            content = await self._ask(
                CHAT_SYSTEM_PROMPT,
                f"{context}\n\nUser Question: {message}",
                json_mode=False,
                max_tokens=settings.AI_CHAT_MAX_TOKENS,
            )
        except ExternalServiceError as e:
            self._log_failure("Error in AI chat", e)
            return CHAT_FAILURE_MESSAGE
        return content.strip() or CHAT_EMPTY_MESSAGE

    async def generate_comprehensive_tips(
        self,
        transactions: List[Transaction],
        budgets: List[Budget],
        assets: List[Asset],
        user_settings: UserSettings,
    ) -> List[FinancialTip]:
        try:
            prompt = self.build_tips_prompt(transactions, budgets, assets, user_settings)
            result = await self._ask_json(TIPS_SYSTEM_PROMPT, prompt, settings.AI_MAX_TOKENS)
            try:
                tips = [FinancialTip.model_validate(item) for item in result.get("tips") or []]
            except (PydanticValidationError, TypeError) as e:
                raise ExternalServiceError("AI returned tips in an unexpected shape") from e
            if not tips:
                raise ExternalServiceError("AI returned no tips")
            return tips[:MAX_TIPS]
        except ExternalServiceError as e:
            self._log_failure("Error generating AI tips", e)
            return self.fallback_tips(transactions)

    @staticmethod
    def fallback_tips(transactions: List[Transaction]) -> List[FinancialTip]:
        tips = [FinancialTip.model_validate(tip) for tip in FALLBACK_TIPS]

        total_expenses = sum((t.amount for t in transactions if t.is_expense), ZERO)
        if total_expenses > 0:
            food = sum(
                (t.amount for t in transactions if t.is_expense and t.category == Category.FOOD),
                ZERO,
            )
            if food > total_expenses * FOOD_SHARE_THRESHOLD:
                tips.append(FinancialTip.model_validate(FOOD_TIP))
        return tips

    async def generate_quick_tip(self, transactions: List[Transaction], budgets: List[Budget]) -> str:
        try:
            content = await self._ask(
                QUICK_TIP_SYSTEM_PROMPT,
                f"Based on {len(transactions)} transactions and {len(budgets)} budgets, give me one quick financial tip.",
                json_mode=False,
                max_tokens=settings.AI_CHAT_MAX_TOKENS,
            )
        except ExternalServiceError as e:
            self._log_failure("Error generating quick tip", e)
            return QUICK_TIP_FALLBACK
        return content.strip() or QUICK_TIP_FALLBACK
