"""Pydantic DTOs exposed by the callback servers."""

from __future__ import annotations

from pydantic import BaseModel


class QuestionRequest(BaseModel):
    question: str


class AnswerResponse(BaseModel):
    answer: str


class ReplyResponse(BaseModel):
    reply: str


class RememberArgs(BaseModel):
    data: str
    category: str


class AnswerArgs(BaseModel):
    question: str
