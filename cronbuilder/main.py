import logging
import os

from fastapi import FastAPI, HTTPException

from cronbuilder.models import ExpressionRequest, RenderedExpression
from cronbuilder.services.errors import ExpressionError
from cronbuilder.services.expression import CronField, Expression

# Simple logging setup (sichtbar in uvicorn-Konsole)
logging.basicConfig(level=os.getenv("CRONBUILDER_LOG_LEVEL", "INFO").upper())
logger = logging.getLogger(__name__)

app = FastAPI(
    title="CronBuilder API",
    version="0.1.0",
)


@app.get("/health")
async def health():
    return {"status": "ok"}


@app.post("/expressions/render", response_model=RenderedExpression)
async def render_expression(request: ExpressionRequest):
    expr = Expression()
    try:
        for field, value in request.field_values().items():
            expr.overwrite(field, value)
    except ExpressionError as e:
        logger.warning("rejected expression request: %s", e)
        raise HTTPException(status_code=422, detail=str(e))

    return RenderedExpression(
        expression=expr.render(),
        segments={f.value: expr.render_field(f) for f in CronField},
    )
