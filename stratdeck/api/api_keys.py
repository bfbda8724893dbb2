"""API key set stored in the key/value store, one record per user."""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from sqlmodel import Session

from stratdeck.database import get_session
from stratdeck.schemas.api_keys import ApiKeysUpdate
from stratdeck.services import kv_store
from stratdeck.services.encryption import encrypt, decrypt
from stratdeck.services.ledger import UserContext
from stratdeck.utils.constants import API_KEYS_PREFIX, API_KEYS_SECRET_FIELDS, DEFAULT_API_KEYS
from stratdeck.api.deps import get_user_context

router = APIRouter(prefix="/api/api-keys", tags=["api-keys"])


def _key(ctx: UserContext) -> str:
    return f"{API_KEYS_PREFIX}{ctx.user_id}"


@router.get("")
def get_api_keys(
    ctx: UserContext = Depends(get_user_context),
    session: Session = Depends(get_session),
):
    stored = kv_store.get(session, _key(ctx))
    if not stored:
        return {"keys": dict(DEFAULT_API_KEYS)}

    keys = dict(stored)
    for field in API_KEYS_SECRET_FIELDS:
        if keys.get(field):
            keys[field] = decrypt(keys[field])
    return {"keys": keys}


@router.put("")
def put_api_keys(
    data: ApiKeysUpdate,
    ctx: UserContext = Depends(get_user_context),
    session: Session = Depends(get_session),
):
    keys = {
        "platform": data.platform or "",
        "apiKey": data.apiKey or "",
        "apiSecret": data.apiSecret or "",
        "authToken": data.authToken or "",
        "updatedAt": datetime.now(timezone.utc).isoformat(),
        "userId": ctx.user_id,
    }

    stored = dict(keys)
    for field in API_KEYS_SECRET_FIELDS:
        if stored[field]:
            stored[field] = encrypt(stored[field])
    kv_store.set(session, _key(ctx), stored)

    return {"keys": keys, "success": True}


@router.delete("")
def reset_api_keys(
    ctx: UserContext = Depends(get_user_context),
    session: Session = Depends(get_session),
):
    kv_store.delete(session, _key(ctx))
    return {"keys": dict(DEFAULT_API_KEYS), "success": True}
