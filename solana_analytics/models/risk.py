"""
Risk assessment models for Solana Analytics.
"""

from enum import Enum
from typing import List

from pydantic import BaseModel, Field


class RiskLevel(str, Enum):
    """Risk band derived from the overall score (higher score = safer)."""

    EXTREMELY_HIGH = "EXTREMELY HIGH"
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


class SubScore(BaseModel):
    """Result of one sub-scorer: a 0-100 score and the factors behind it."""

    score: int = Field(ge=0, le=100)
    factors: List[str] = Field(default_factory=list)


class RiskAssessment(BaseModel):
    """
    Combined token risk assessment.

    ``contract_risk_score`` is a constant placeholder and is not part of
    the weighted overall score.
    """
    liquidity_score: int = Field(ge=0, le=100)
    holder_concentration_score: int = Field(ge=0, le=100)
    transaction_pattern_score: int = Field(ge=0, le=100)
    contract_risk_score: int = Field(ge=0, le=100)
    overall_risk_score: int = Field(ge=0, le=100)
    risk_level: RiskLevel
    risk_factors: List[str] = Field(default_factory=list)
    scoring_model_version: str

    def to_metrics(self) -> dict:
        """Render the detailed metrics in the action's JSON shape."""
        return {
            "liquidityScore": self.liquidity_score,
            "holderConcentrationScore": self.holder_concentration_score,
            "transactionPatternScore": self.transaction_pattern_score,
            "contractRiskScore": self.contract_risk_score,
            "overallRiskScore": self.overall_risk_score,
            "riskFactors": list(self.risk_factors),
            "scoringModelVersion": self.scoring_model_version,
        }
