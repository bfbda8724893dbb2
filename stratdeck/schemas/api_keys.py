"""Pydantic schemas for the API key set stored in the key/value store."""

from pydantic import BaseModel


class ApiKeysUpdate(BaseModel):
    platform: str | None = None
    apiKey: str | None = None
    apiSecret: str | None = None
    authToken: str | None = None
