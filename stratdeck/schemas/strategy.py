"""Pydantic schemas for the strategy catalog, deployments and portfolio."""

from datetime import datetime

from pydantic import BaseModel, Field


class StrategyRead(BaseModel):
    id: int
    name: str
    image_uri: str
    description: str | None
    requires_telegram: bool
    default_qty: int | None
    active: bool

    model_config = {"from_attributes": True}


class DeployRequest(BaseModel):
    broker_id: int | None = None
    telegram_chat_id: int | None = None
    qty: int | None = Field(default=None, gt=0)
    dry_run: bool = True


class UserStrategyUpdate(BaseModel):
    broker_id: int | None = None
    telegram_chat_id: int | None = None
    qty: int | None = Field(default=None, gt=0)
    dry_run: bool | None = None


class UserStrategyRead(BaseModel):
    id: int
    strategy_id: int
    broker_id: int | None
    telegram_chat_id: int | None
    qty: int | None
    dry_run: bool
    active: bool
    config_version: int
    task_arn: str | None
    last_task_status: str | None
    last_seen: datetime | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class PortfolioEntry(UserStrategyRead):
    strategy_name: str
    broker_name: str | None = None
    telegram_label: str | None = None
