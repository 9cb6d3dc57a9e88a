import json
import logging

from fastapi import APIRouter, Request
from fastapi.concurrency import run_in_threadpool

from careerai.core.actions import Action
from careerai.core.errors import MalformedRequestError, UnknownActionError
from careerai.schemas.ai import DispatchResponse, ErrorResponse, NormalizeRequest, NormalizeResponse
from careerai.services.dispatcher import dispatch
from careerai.services.normalizer import normalize

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/ai", tags=["ai"])

_ERRORS = {400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}}


@router.post("", response_model=DispatchResponse, responses=_ERRORS)
async def run_action(request: Request):
    """Body: {"action": ..., "payload": {...}}. Returns the provider's raw text as {"result": ...}."""
    raw = await request.body()
    try:
        body = json.loads(raw or b"{}")
    except ValueError as e:
        raise MalformedRequestError(details=str(e)) from e
    if not isinstance(body, dict):
        raise MalformedRequestError(details="Request body must be a JSON object")

    # dispatch blocks on the provider call
    result = await run_in_threadpool(dispatch, body.get("action"), body.get("payload"))
    return DispatchResponse(result=result)


@router.post("/normalize", response_model=NormalizeResponse, responses={400: {"model": ErrorResponse}})
def normalize_text(data: NormalizeRequest):
    """Normalize raw provider text for an action without calling the provider."""
    action = Action.parse(data.action)
    if action is None:
        raise UnknownActionError(details=f"Unsupported action: {data.action!r}")
    result = normalize(action, data.text)
    return NormalizeResponse(
        action=action.value,
        result=result.to_jsonable(),
        shape=result.shape.value,
        fallback=result.fallback.value if result.fallback else None,
    )
