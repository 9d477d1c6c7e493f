from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.responses import JSONResponse
from starlette.requests import Request

from dicebox.config import settings
from dicebox.dependencies import get_dice_config
from dicebox.dice.assist import get_dice_expression_suggestions
from dicebox.dice.errors import DiceError, InvalidExpression, format_dice_error
from dicebox.dice.types import DiceRollConfig
from dicebox.routers import dice

logging.basicConfig(level=settings.log_level.upper())

app = FastAPI(title="Dicebox", debug=settings.debug)

app.include_router(dice.router)


@app.get("/")
async def index() -> dict[str, str]:
    return {"name": "Dicebox", "environment": settings.environment}


def _request_dice_config(request: Request) -> DiceRollConfig:
    """The dice limits the failing route enforced, honouring dependency overrides."""
    provider = request.app.dependency_overrides.get(get_dice_config, get_dice_config)
    return provider()


@app.exception_handler(DiceError)
async def dice_error_handler(request: Request, exc: DiceError) -> JSONResponse:
    """Report engine failures that escape a route as 422s with a readable message."""
    suggestions = (
        get_dice_expression_suggestions(exc.expression)
        if isinstance(exc, InvalidExpression)
        else []
    )
    return JSONResponse(
        status_code=422,
        content={
            "detail": {
                "message": format_dice_error(exc, _request_dice_config(request)),
                "error": exc.code,
                "suggestions": suggestions,
            }
        },
    )
