"""Respuestas compartidas (conteos, borrados, comandos sin payload)."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class CountRes(BaseModel):
    count: int


class DeleteRes(BaseModel):
    deleted: bool


class MessageRes(BaseModel):
    message: str


class VerificationStatusRes(BaseModel):
    verified: bool
    pending: bool
    expires_at: datetime | None = None
