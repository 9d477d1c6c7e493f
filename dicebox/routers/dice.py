"""Dice API routes: validate, roll, apply roll types, analyze and text helpers."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from dicebox.dependencies import get_dice_config, get_random_source
from dicebox.dice.assist import (
    check_dice_expression_safety,
    get_dice_expression_suggestions,
    sanitize_dice_input,
)
from dicebox.dice.breakdown import (
    describe_expression,
    format_roll_result,
    get_dice_average,
    get_dice_range,
)
from dicebox.dice.catalog import COMMON_DAGGERHEART_ROLLS, STANDARD_DICE
from dicebox.dice.errors import UnknownError, format_dice_error
from dicebox.dice.modifiers import apply_roll_type_to_existing_result, can_apply_critical
from dicebox.dice.parser import (
    extract_dice_expressions,
    is_valid_dice_expression,
    resolve_expression,
    validate_dice_expression,
    validate_multiple_dice_expressions,
)
from dicebox.dice.rng import RandomSource, make_random_source
from dicebox.dice.roller import roll_dice_expression
from dicebox.dice.types import DiceExpression, DiceRollConfig
from dicebox.schemas import (
    AnalyzeResponse,
    ApplyRollTypeRequest,
    CatalogResponse,
    CommonRollSchema,
    DiceExpressionSchema,
    DiceRollResultSchema,
    DieTypeSchema,
    ExtractResponse,
    RollRequest,
    SafetySchema,
    SanitizeResponse,
    TextRequest,
    ValidateRequest,
    ValidationItem,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/dice", tags=["dice"])


def _parse_or_422(expression: str, config: DiceRollConfig) -> DiceExpression:
    """Parse ``expression`` or raise a 422 carrying the message and suggestions."""
    result = validate_dice_expression(expression, config)
    if result.expression is not None:
        return result.expression
    error = result.error or UnknownError("Dice expression could not be parsed")
    raise HTTPException(
        status_code=422,
        detail={
            "message": format_dice_error(error, config),
            "error": error.code,
            "suggestions": get_dice_expression_suggestions(expression),
        },
    )


def _pick_rng(seed: int | None, default: RandomSource) -> RandomSource:
    return make_random_source(seed) if seed is not None else default


@router.post("/validate", response_model=list[ValidationItem])
async def validate(
    body: ValidateRequest,
    config: DiceRollConfig = Depends(get_dice_config),
) -> list[ValidationItem]:
    """Validate a batch of expressions, preserving order."""
    items = []
    for text, result in zip(
        body.expressions, validate_multiple_dice_expressions(body.expressions, config)
    ):
        if result.expression is not None:
            items.append(
                ValidationItem(
                    expression=text,
                    is_valid=True,
                    parsed=DiceExpressionSchema.from_expression(result.expression),
                )
            )
        else:
            error = result.error or UnknownError("Dice expression could not be parsed")
            items.append(
                ValidationItem(
                    expression=text,
                    is_valid=False,
                    error=error.code,
                    message=format_dice_error(error, config),
                )
            )
    return items


@router.post("/roll", response_model=DiceRollResultSchema)
async def roll(
    body: RollRequest,
    config: DiceRollConfig = Depends(get_dice_config),
    rng: RandomSource = Depends(get_random_source),
) -> DiceRollResultSchema:
    """Roll an expression with an optional roll type."""
    expression = _parse_or_422(body.expression, config)
    safety = check_dice_expression_safety(body.expression)
    if not safety.is_safe:
        logger.warning("Rolling expensive expression %r: %s", body.expression, safety.warnings)
    result = roll_dice_expression(expression, body.roll_type, config, _pick_rng(body.seed, rng))
    return DiceRollResultSchema.from_result(result, format_roll_result(result, config))


@router.post("/apply", response_model=DiceRollResultSchema)
async def apply_roll_type(
    body: ApplyRollTypeRequest,
    config: DiceRollConfig = Depends(get_dice_config),
    rng: RandomSource = Depends(get_random_source),
) -> DiceRollResultSchema:
    """Apply a roll type to a previous result without rerolling its base dice.

    Rejected transitions return the submitted result unchanged.
    """
    previous = body.result.to_result()
    resolve_expression(previous.expression, config)
    updated = apply_roll_type_to_existing_result(
        previous, body.roll_type, _pick_rng(body.seed, rng)
    )
    if updated is previous and previous.roll_type != body.roll_type:
        logger.warning(
            "Roll type %s not applicable to %s roll of %r",
            body.roll_type.value,
            previous.roll_type.value,
            previous.expression.original_expression,
        )
    return DiceRollResultSchema.from_result(updated, format_roll_result(updated, config))


@router.get("/analyze", response_model=AnalyzeResponse)
async def analyze(
    expression: str = Query(..., max_length=200),
    config: DiceRollConfig = Depends(get_dice_config),
) -> AnalyzeResponse:
    """Theoretical range, average and safety of an expression. Nothing is rolled."""
    parsed = _parse_or_422(expression, config)
    dice_range = get_dice_range(parsed, config)
    return AnalyzeResponse(
        expression=DiceExpressionSchema.from_expression(parsed),
        canonical=describe_expression(parsed),
        min=dice_range.min,
        max=dice_range.max,
        average=get_dice_average(parsed, config),
        can_apply_critical=can_apply_critical(parsed, config),
        safety=SafetySchema.from_report(check_dice_expression_safety(expression)),
    )


@router.post("/sanitize", response_model=SanitizeResponse)
async def sanitize(
    body: TextRequest,
    config: DiceRollConfig = Depends(get_dice_config),
) -> SanitizeResponse:
    """Clean sloppy input and report whether the cleaned text parses."""
    sanitized = sanitize_dice_input(body.text)
    return SanitizeResponse(
        original=body.text,
        sanitized=sanitized,
        is_valid=is_valid_dice_expression(sanitized, config),
        suggestions=get_dice_expression_suggestions(body.text),
    )


@router.post("/extract", response_model=ExtractResponse)
async def extract(body: TextRequest) -> ExtractResponse:
    """Find rollable expressions inside prose."""
    return ExtractResponse(expressions=extract_dice_expressions(body.text))


@router.get("/standard", response_model=CatalogResponse)
async def standard() -> CatalogResponse:
    return CatalogResponse(
        standard_dice=[
            DieTypeSchema(sides=d.sides, name=d.name, common=d.common) for d in STANDARD_DICE
        ],
        common_rolls=[
            CommonRollSchema(name=r.name, expression=r.expression, description=r.description)
            for r in COMMON_DAGGERHEART_ROLLS
        ],
    )
