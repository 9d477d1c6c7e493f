"""Pydantic request and response models for the dice HTTP API.

Engine values are frozen dataclasses; these models mirror them for JSON and
convert in both directions so a client can send a previous result back to
``POST /dice/apply``.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from dicebox.dice.assist import SafetyReport
from dicebox.dice.breakdown import calculate_breakdown
from dicebox.dice.types import (
    DiceBreakdown,
    DiceExpression,
    DiceRollResult,
    Die,
    RollOrigin,
    RollType,
    SingleRoll,
)


class DieSchema(BaseModel):
    count: int = Field(ge=1)
    sides: int = Field(ge=2)


class DiceExpressionSchema(BaseModel):
    dice: list[DieSchema]
    modifier: int
    original_expression: str

    @classmethod
    def from_expression(cls, expression: DiceExpression) -> DiceExpressionSchema:
        return cls(
            dice=[DieSchema(count=d.count, sides=d.sides) for d in expression.dice],
            modifier=expression.modifier,
            original_expression=expression.original_expression,
        )

    def to_expression(self) -> DiceExpression:
        return DiceExpression(
            dice=tuple(Die(count=d.count, sides=d.sides) for d in self.dice),
            modifier=self.modifier,
            original_expression=self.original_expression,
        )


class SingleRollSchema(BaseModel):
    value: int
    sides: int
    is_critical: bool
    origin: RollOrigin = RollOrigin.base


class DiceBreakdownSchema(BaseModel):
    die_spec: str
    values: list[int]
    subtotal: int

    @classmethod
    def from_breakdown(cls, entry: DiceBreakdown) -> DiceBreakdownSchema:
        return cls(die_spec=entry.die_spec, values=list(entry.values), subtotal=entry.subtotal)


class DiceRollResultSchema(BaseModel):
    expression: DiceExpressionSchema
    rolls: list[SingleRollSchema]
    modifier: int
    total: int
    breakdown: list[DiceBreakdownSchema]
    timestamp: datetime
    roll_type: RollType
    summary: str = ""

    @classmethod
    def from_result(cls, result: DiceRollResult, summary: str = "") -> DiceRollResultSchema:
        return cls(
            expression=DiceExpressionSchema.from_expression(result.expression),
            rolls=[
                SingleRollSchema(
                    value=r.value, sides=r.sides, is_critical=r.is_critical, origin=r.origin
                )
                for r in result.rolls
            ],
            modifier=result.modifier,
            total=result.total,
            breakdown=[DiceBreakdownSchema.from_breakdown(b) for b in result.breakdown],
            timestamp=result.timestamp,
            roll_type=result.roll_type,
            summary=summary,
        )

    def to_result(self) -> DiceRollResult:
        """Rebuild the engine value. Total and breakdown are recomputed from the rolls."""
        expression = self.expression.to_expression()
        rolls = tuple(
            SingleRoll(value=r.value, sides=r.sides, is_critical=r.is_critical, origin=r.origin)
            for r in self.rolls
        )
        return DiceRollResult(
            expression=expression,
            rolls=rolls,
            modifier=expression.modifier,
            total=sum(r.value for r in rolls) + expression.modifier,
            breakdown=calculate_breakdown(expression.dice, rolls),
            timestamp=self.timestamp,
            roll_type=self.roll_type,
        )


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


class RollRequest(BaseModel):
    expression: str = Field(max_length=200)
    roll_type: RollType = RollType.normal
    seed: int | None = None


class ApplyRollTypeRequest(BaseModel):
    result: DiceRollResultSchema
    roll_type: RollType
    seed: int | None = None


class ValidateRequest(BaseModel):
    expressions: list[str] = Field(max_length=50)


class TextRequest(BaseModel):
    text: str = Field(max_length=5000)


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


class ValidationItem(BaseModel):
    expression: str
    is_valid: bool
    error: str | None = None
    message: str | None = None
    parsed: DiceExpressionSchema | None = None


class SafetySchema(BaseModel):
    is_safe: bool
    warnings: list[str]

    @classmethod
    def from_report(cls, report: SafetyReport) -> SafetySchema:
        return cls(is_safe=report.is_safe, warnings=list(report.warnings))


class AnalyzeResponse(BaseModel):
    expression: DiceExpressionSchema
    canonical: str
    min: int
    max: int
    average: float
    can_apply_critical: bool
    safety: SafetySchema


class SanitizeResponse(BaseModel):
    original: str
    sanitized: str
    is_valid: bool
    suggestions: list[str]


class ExtractResponse(BaseModel):
    expressions: list[str]


class DieTypeSchema(BaseModel):
    sides: int
    name: str
    common: bool


class CommonRollSchema(BaseModel):
    name: str
    expression: str
    description: str


class CatalogResponse(BaseModel):
    standard_dice: list[DieTypeSchema]
    common_rolls: list[CommonRollSchema]
