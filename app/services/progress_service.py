from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any, Callable, Iterable

from app.models.goal import SavingsGoal
from app.models.transaction import Transaction, TransactionType
from app.utils.datetime_utils import ceil_days_between, utc_now
from app.utils.money import (
    ZERO,
    capped_percentage,
    format_money,
    normalize_money,
    round_half_up,
    safe_decimal,
)

MONTHS_PER_YEAR = 12


@dataclass(frozen=True)
class GoalProgressReport:
    goal: SavingsGoal
    progress_percentage: int
    total_deposits: Decimal
    total_withdrawals: Decimal
    total_days: int
    elapsed_days: int
    remaining_days: int
    time_progress_percentage: int
    is_on_track: bool
    daily_amount_needed: Decimal
    transaction_count: int


@dataclass(frozen=True)
class RoiProjection:
    future_value: Decimal
    total_contribution: Decimal
    interest_earned: Decimal
    roi: Decimal


@dataclass(frozen=True)
class GrowthPoint:
    year: int
    value: Decimal
    contributions: Decimal


def _grow(
    balance: Decimal, monthly_contribution: Decimal, monthly_rate: Decimal, months: int
) -> Decimal:
    for _ in range(months):
        balance = (balance + monthly_contribution) * (1 + monthly_rate)
    return balance


def _monthly_rate(annual_interest_rate: Decimal) -> Decimal:
    return annual_interest_rate / MONTHS_PER_YEAR / 100


class ProgressService:
    def __init__(self, *, now_provider: Callable[[], datetime] | None = None) -> None:
        self._now_provider = now_provider or utc_now

    def build_report(
        self, goal: SavingsGoal, transactions: Iterable[Transaction]
    ) -> GoalProgressReport:
        now = self._now_provider()
        owned = [item for item in transactions if item.goal_id == goal.id]
        total_deposits = sum(
            (item.amount for item in owned if item.type is TransactionType.DEPOSIT),
            ZERO,
        )
        total_withdrawals = sum(
            (item.amount for item in owned if item.type is TransactionType.WITHDRAWAL),
            ZERO,
        )

        progress = capped_percentage(goal.current_amount, goal.target_amount)
        total_days = ceil_days_between(goal.start_date, goal.end_date)
        elapsed_days = ceil_days_between(goal.start_date, now)
        remaining_days = max(0, total_days - elapsed_days)
        if total_days <= 0:
            time_progress = 100
        else:
            time_progress = min(
                100, round_half_up(Decimal(elapsed_days) / Decimal(total_days) * 100)
            )

        # Past-target goals report a negative daily amount; callers decide
        # how to display it.
        daily_amount_needed = (
            normalize_money((goal.target_amount - goal.current_amount) / remaining_days)
            if remaining_days > 0
            else ZERO
        )

        return GoalProgressReport(
            goal=goal,
            progress_percentage=progress,
            total_deposits=normalize_money(total_deposits),
            total_withdrawals=normalize_money(total_withdrawals),
            total_days=total_days,
            elapsed_days=elapsed_days,
            remaining_days=remaining_days,
            time_progress_percentage=time_progress,
            is_on_track=progress >= time_progress,
            daily_amount_needed=daily_amount_needed,
            transaction_count=len(owned),
        )

    @staticmethod
    def calculate_roi(
        *,
        principal: Decimal | int | float | str,
        monthly_contribution: Decimal | int | float | str,
        annual_interest_rate: Decimal | int | float | str,
        years: int,
    ) -> RoiProjection:
        principal_amount = safe_decimal(principal) or ZERO
        contribution = safe_decimal(monthly_contribution) or ZERO
        monthly_rate = _monthly_rate(safe_decimal(annual_interest_rate) or ZERO)
        months = years * MONTHS_PER_YEAR

        future_value = normalize_money(
            _grow(principal_amount, contribution, monthly_rate, months)
        )
        total_contribution = normalize_money(principal_amount + contribution * months)
        interest_earned = future_value - total_contribution
        roi = (
            normalize_money(interest_earned / total_contribution * 100)
            if total_contribution > 0
            else normalize_money(ZERO)
        )
        return RoiProjection(
            future_value=future_value,
            total_contribution=total_contribution,
            interest_earned=interest_earned,
            roi=roi,
        )

    @staticmethod
    def build_growth_series(
        *,
        principal: Decimal | int | float | str,
        monthly_contribution: Decimal | int | float | str,
        annual_interest_rate: Decimal | int | float | str,
        years: int,
    ) -> list[GrowthPoint]:
        principal_amount = safe_decimal(principal) or ZERO
        contribution = safe_decimal(monthly_contribution) or ZERO
        monthly_rate = _monthly_rate(safe_decimal(annual_interest_rate) or ZERO)

        points = [
            GrowthPoint(
                year=0,
                value=normalize_money(principal_amount),
                contributions=normalize_money(principal_amount),
            )
        ]
        balance = principal_amount
        for year in range(1, years + 1):
            balance = _grow(balance, contribution, monthly_rate, MONTHS_PER_YEAR)
            points.append(
                GrowthPoint(
                    year=year,
                    value=normalize_money(balance),
                    contributions=normalize_money(
                        principal_amount + contribution * MONTHS_PER_YEAR * year
                    ),
                )
            )
        return points

    @staticmethod
    def serialize_report(report: GoalProgressReport) -> dict[str, Any]:
        return {
            "goalId": report.goal.id,
            "progressPercentage": report.progress_percentage,
            "totalDeposits": format_money(report.total_deposits),
            "totalWithdrawals": format_money(report.total_withdrawals),
            "transactionCount": report.transaction_count,
            "totalDays": report.total_days,
            "elapsedDays": report.elapsed_days,
            "remainingDays": report.remaining_days,
            "timeProgressPercentage": report.time_progress_percentage,
            "isOnTrack": report.is_on_track,
            "dailyAmountNeeded": format_money(report.daily_amount_needed),
        }

    @staticmethod
    def serialize_roi(projection: RoiProjection) -> dict[str, str]:
        return {
            "futureValue": format_money(projection.future_value),
            "totalContribution": format_money(projection.total_contribution),
            "interestEarned": format_money(projection.interest_earned),
            "roi": format_money(projection.roi),
        }

    @staticmethod
    def serialize_growth_series(points: Iterable[GrowthPoint]) -> list[dict[str, Any]]:
        return [
            {
                "year": point.year,
                "value": format_money(point.value),
                "contributions": format_money(point.contributions),
            }
            for point in points
        ]
