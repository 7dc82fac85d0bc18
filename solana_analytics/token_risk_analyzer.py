"""Token fraud and rug-pull risk scoring for Solana tokens.

Scoring is a pure function of the holder distribution, a recent transaction
window and the mint metadata. Higher scores mean safer tokens.
"""

import math
from dataclasses import dataclass
from typing import List, Optional

from solana_analytics.constants import SECONDS_PER_DAY
from solana_analytics.logging_config import get_logger, log_with_context
from solana_analytics.models.results import FetchResult
from solana_analytics.models.risk import RiskAssessment, RiskLevel, SubScore
from solana_analytics.models.token import OnChainTokenMeta, TokenHolder
from solana_analytics.models.transaction import (
    LedgerTransaction,
    TransactionStatus,
    TransactionType,
)

# Set up logging
logger = get_logger(__name__)

HOLDER_DATA_WARNING = "Warning: Could not fetch holder distribution data"
TRANSACTION_DATA_WARNING = "Warning: Could not fetch transaction data"


@dataclass(frozen=True)
class RiskScoringConfig:
    """Weights, thresholds and deductions of the scoring model."""
    version: str = "1.0.0"

    # Overall score weights
    holder_weight: float = 0.4
    transaction_weight: float = 0.3
    liquidity_weight: float = 0.3

    # Holder concentration (percentages of observed supply)
    top_holder_extreme_pct: float = 50.0
    top_holder_extreme_deduction: int = 30
    top_holder_high_pct: float = 30.0
    top_holder_high_deduction: int = 20
    top10_extreme_pct: float = 90.0
    top10_extreme_deduction: int = 25
    top10_high_pct: float = 70.0
    top10_high_deduction: int = 15
    top_holder_count: int = 10

    # Transaction patterns
    failed_ratio_threshold: float = 0.2
    failed_ratio_deduction: int = 20
    transfer_ratio_threshold: float = 0.8
    transfer_ratio_deduction: int = 15
    tx_rate_threshold: float = 0.1  # transactions per second over the observed span
    tx_rate_deduction: int = 10

    # Liquidity
    very_low_volume: float = 0.1  # SOL per transaction
    very_low_volume_deduction: int = 20
    low_volume: float = 1.0
    low_volume_deduction: int = 10
    very_low_tx_per_day: float = 1.0
    very_low_tx_per_day_deduction: int = 15
    low_tx_per_day: float = 10.0
    low_tx_per_day_deduction: int = 5
    mint_authority_deduction: int = 25
    freeze_authority_deduction: int = 15
    min_program_diversity: int = 3
    program_diversity_deduction: int = 10

    # Not derived from any contract inspection and not part of the weighted sum
    contract_risk_placeholder: int = 100

    # Band thresholds, lower bound exclusive of the band below
    extremely_high_below: int = 40
    high_below: int = 60
    medium_below: int = 80


def _observed_span(transactions: List[LedgerTransaction]) -> Optional[int]:
    """Seconds between the newest and oldest timestamped transactions."""
    timestamps = [tx.timestamp for tx in transactions if tx.timestamp is not None]
    if not timestamps:
        return None
    return timestamps[0] - timestamps[-1]


class TokenRiskAnalyzer:
    """Scores a token from holder, transaction and mint data."""

    def __init__(self, config: Optional[RiskScoringConfig] = None):
        """
        Initialize the analyzer.

        Args:
            config: Scoring model. Defaults to the current model version.
        """
        self.config = config or RiskScoringConfig()

    def analyze_holder_concentration(self, holders: List[TokenHolder]) -> SubScore:
        """Score how concentrated the observed supply is."""
        cfg = self.config
        if not holders:
            return SubScore(score=0, factors=["No holder data available"])

        score = 100
        factors = []
        ranked = sorted(holders, key=lambda h: h.percentage_of_observed_supply, reverse=True)

        top = ranked[0].percentage_of_observed_supply
        if top > cfg.top_holder_extreme_pct:
            score -= cfg.top_holder_extreme_deduction
            factors.append(f"Extreme concentration: Top holder owns {top:.2f}%")
        elif top > cfg.top_holder_high_pct:
            score -= cfg.top_holder_high_deduction
            factors.append(f"High concentration: Top holder owns {top:.2f}%")

        top10 = sum(h.percentage_of_observed_supply for h in ranked[:cfg.top_holder_count])
        if top10 > cfg.top10_extreme_pct:
            score -= cfg.top10_extreme_deduction
            factors.append(f"Extreme top 10 concentration: {top10:.2f}%")
        elif top10 > cfg.top10_high_pct:
            score -= cfg.top10_high_deduction
            factors.append(f"High top 10 concentration: {top10:.2f}%")

        return SubScore(score=max(0, score), factors=factors)

    def analyze_transaction_patterns(self, transactions: List[LedgerTransaction]) -> SubScore:
        """Score failure rate, transfer dominance and burstiness of the window."""
        cfg = self.config
        try:
            score = 100
            factors = []
            count = len(transactions)

            failed = sum(1 for tx in transactions if tx.status == TransactionStatus.FAILED)
            if failed > count * cfg.failed_ratio_threshold:
                score -= cfg.failed_ratio_deduction
                factors.append("High rate of failed transactions")

            transfers = sum(
                1 for tx in transactions if tx.classified_type == TransactionType.TOKEN_TRANSFER
            )
            if transfers > count * cfg.transfer_ratio_threshold:
                score -= cfg.transfer_ratio_deduction
                factors.append("Suspicious transaction pattern: High concentration of transfers")

            timed = sum(1 for tx in transactions if tx.timestamp is not None)
            span = _observed_span(transactions) if timed > 1 else None
            if span and span > 0 and timed / span > cfg.tx_rate_threshold:
                score -= cfg.tx_rate_deduction
                factors.append("Unusual transaction frequency")

            return SubScore(score=max(0, score), factors=factors)
        except Exception as e:
            logger.error(f"Error analyzing transaction patterns: {str(e)}")
            return SubScore(score=0, factors=["Error analyzing transactions"])

    def analyze_liquidity(
        self,
        transactions: List[LedgerTransaction],
        token_meta: OnChainTokenMeta
    ) -> SubScore:
        """Score trading volume, activity frequency, authorities and program diversity."""
        cfg = self.config
        try:
            score = 100
            factors = []
            count = len(transactions)

            total_volume = sum(abs(tx.sol_delta) for tx in transactions)
            avg_volume = total_volume / (count or 1)
            if avg_volume < cfg.very_low_volume:
                score -= cfg.very_low_volume_deduction
                factors.append("Very low average transaction volume")
            elif avg_volume < cfg.low_volume:
                score -= cfg.low_volume_deduction
                factors.append("Low average transaction volume")

            if count > 0:
                span = _observed_span(transactions)
                if span is None or span < 0:
                    tx_per_day = 0.0
                elif span == 0:
                    # a window inside one second counts as arbitrarily frequent
                    tx_per_day = math.inf
                else:
                    tx_per_day = count / (span / SECONDS_PER_DAY)

                if tx_per_day < cfg.very_low_tx_per_day:
                    score -= cfg.very_low_tx_per_day_deduction
                    factors.append("Very low transaction frequency (less than 1 tx per day)")
                elif tx_per_day < cfg.low_tx_per_day:
                    score -= cfg.low_tx_per_day_deduction
                    factors.append("Low transaction frequency")

            if token_meta.mint_authority:
                score -= cfg.mint_authority_deduction
                factors.append("Active mint authority - token supply can be increased")

            if token_meta.freeze_authority:
                score -= cfg.freeze_authority_deduction
                factors.append("Active freeze authority - accounts can be frozen")

            programs = {pid for tx in transactions for pid in tx.counterparty_program_ids}
            if len(programs) < cfg.min_program_diversity:
                score -= cfg.program_diversity_deduction
                factors.append("Limited program interaction diversity")

            return SubScore(score=max(0, score), factors=factors)
        except Exception as e:
            logger.error(f"Error analyzing liquidity: {str(e)}")
            return SubScore(score=0, factors=[f"Error analyzing on-chain data: {str(e) or 'Unknown error'}"])

    def calculate_overall_score(self, holder_score: int, transaction_score: int, liquidity_score: int) -> int:
        """Weighted sum of the sub-scores, rounded half up and clamped to 0-100."""
        cfg = self.config
        weighted = (
            holder_score * cfg.holder_weight
            + transaction_score * cfg.transaction_weight
            + liquidity_score * cfg.liquidity_weight
        )
        # round() rounds half to even, the model rounds half up
        return min(100, max(0, math.floor(weighted + 0.5)))

    def risk_level(self, overall_score: int) -> RiskLevel:
        """Map an overall score to its risk band."""
        cfg = self.config
        if overall_score < cfg.extremely_high_below:
            return RiskLevel.EXTREMELY_HIGH
        if overall_score < cfg.high_below:
            return RiskLevel.HIGH
        if overall_score < cfg.medium_below:
            return RiskLevel.MEDIUM
        return RiskLevel.LOW

    def assess(
        self,
        holders: FetchResult[List[TokenHolder]],
        transactions: FetchResult[List[LedgerTransaction]],
        token_meta: OnChainTokenMeta
    ) -> RiskAssessment:
        """
        Score a token.

        Warning factors are appended after the score-derived factors when
        holder or transaction data could not be obtained, so a zero from
        missing data can be told apart from a genuinely risky token.

        Args:
            holders: Holder distribution, possibly degraded
            transactions: Recent transaction window, possibly degraded
            token_meta: Mint metadata

        Returns:
            The combined assessment
        """
        holder_analysis = self.analyze_holder_concentration(holders.value)
        transaction_analysis = self.analyze_transaction_patterns(transactions.value)
        liquidity_analysis = self.analyze_liquidity(transactions.value, token_meta)

        overall = self.calculate_overall_score(
            holder_analysis.score,
            transaction_analysis.score,
            liquidity_analysis.score
        )

        factors = [
            *holder_analysis.factors,
            *transaction_analysis.factors,
            *liquidity_analysis.factors,
        ]
        if holders.is_degraded or not holders.value:
            factors.append(HOLDER_DATA_WARNING)
        if transactions.is_degraded or transaction_analysis.score == 0:
            factors.append(TRANSACTION_DATA_WARNING)

        level = self.risk_level(overall)
        log_with_context(
            logger,
            "info",
            "Token risk scored",
            overall=overall,
            risk_level=level.value,
            model=self.config.version
        )

        return RiskAssessment(
            liquidity_score=liquidity_analysis.score,
            holder_concentration_score=holder_analysis.score,
            transaction_pattern_score=transaction_analysis.score,
            contract_risk_score=self.config.contract_risk_placeholder,
            overall_risk_score=overall,
            risk_level=level,
            risk_factors=factors,
            scoring_model_version=self.config.version,
        )

    @staticmethod
    def build_summary(assessment: RiskAssessment) -> str:
        """Human-readable summary listing the risk factors."""
        header = (
            f"Token Risk Analysis ({assessment.overall_risk_score}% risk score - "
            f"{assessment.risk_level.value} RISK):\n"
        )
        if assessment.risk_factors:
            return header + "\nRisk Factors:\n- " + "\n- ".join(assessment.risk_factors)
        return header + "No significant risk factors detected"
