"""Answer general questions, using public APIs for population and currency rates.

The model picks one of a closed set of tools; any other tool name it returns
is rejected with ``UnknownTool``.
"""

from __future__ import annotations

from decimal import Decimal
from enum import Enum
from typing import Any

import orjson
import requests
from pydantic import BaseModel, Field

from aidevs_tasks.core.errors import EmptyResult, NoAnswer, ParseError, UnknownTool
from aidevs_tasks.core.logging import get_logger
from aidevs_tasks.ingest.loaders import load_dataset
from aidevs_tasks.llm.client import LLMClient
from aidevs_tasks.tasks.base import TaskContext, TaskResponse

logger = get_logger(__name__)

POPULATION_URL = "https://restcountries.com/v3.1/name/{country}"
CURRENCY_URL = "https://api.nbp.pl/api/exchangerates/rates/A/{currency_code}"


class KnowledgeTask(TaskResponse):
    database1: str = Field(default="", alias="database #1")
    database2: str = Field(default="", alias="database #2")
    question: str


class CountryInfo(BaseModel):
    population: int

    model_config = {"extra": "ignore"}


class CurrencyRate(BaseModel):
    effective_date: str = Field(alias="effectiveDate")
    mid: Decimal
    no: str


class CurrencyTable(BaseModel):
    code: str
    currency: str
    rates: list[CurrencyRate]
    table: str


class KnowledgeTool(str, Enum):
    POPULATION = "get_population_api_call"
    CURRENCY_RATE = "get_currency_rate_api_call"
    ASK_LLM = "ask_llm"


def _function(name: KnowledgeTool, description: str, argument: str, argument_description: str) -> dict[str, Any]:
    return {
        "type": "function",
        "function": {
            "name": name.value,
            "description": description,
            "parameters": {
                "type": "object",
                "properties": {argument: {"type": "string", "description": argument_description}},
                "required": [argument],
            },
        },
    }


CHAT_TOOLS: list[dict[str, Any]] = [
    _function(KnowledgeTool.POPULATION, "Get country population", "country", "Country name (in english)"),
    _function(
        KnowledgeTool.CURRENCY_RATE,
        "Get currency rate to Polish Złoty (PLN)",
        "currency_code",
        "Currency code",
    ),
    _function(KnowledgeTool.ASK_LLM, "Ask LLM base knowledge", "question", "Question"),
]


def get_population(country: str, session: requests.Session | None = None) -> int:
    countries = load_dataset(POPULATION_URL.format(country=country), list[CountryInfo], session=session)
    if not countries:
        raise EmptyResult(f"Can not get {country} population from API")
    return countries[0].population


def get_currency_rate(currency_code: str, session: requests.Session | None = None) -> Decimal:
    table = load_dataset(CURRENCY_URL.format(currency_code=currency_code), CurrencyTable, session=session)
    if not table.rates:
        raise EmptyResult(f"Currency rate to PLN for {currency_code} not found.")
    return table.rates[0].mid


class KnowledgeTools:
    """Execute tool calls chosen by the model."""

    def __init__(self, llm: LLMClient, session: requests.Session | None = None) -> None:
        self.llm = llm
        self.session = session

    def handle(self, name: str, arguments: str) -> Any:
        try:
            tool = KnowledgeTool(name)
        except ValueError as exc:
            raise UnknownTool(f"Function '{name}' does not exist") from exc
        try:
            args = orjson.loads(arguments or "{}")
        except orjson.JSONDecodeError as exc:
            raise ParseError(f"Arguments of '{name}' are not valid JSON: {arguments}") from exc
        logger.debug("Calling '%s' with args: %s", name, args)
        if tool is KnowledgeTool.POPULATION:
            return get_population(_argument(args, "country"), session=self.session)
        if tool is KnowledgeTool.CURRENCY_RATE:
            return float(get_currency_rate(_argument(args, "currency_code"), session=self.session))
        if tool is KnowledgeTool.ASK_LLM:
            return self.llm.ask(_argument(args, "question"))
        raise UnknownTool(f"Function '{name}' has no handler")


def _argument(args: Any, key: str) -> str:
    value = args.get(key) if isinstance(args, dict) else None
    if not isinstance(value, str):
        raise ParseError(f"No field '{key}' in args")
    return value


def run(ctx: TaskContext, token: str) -> Any:
    task = ctx.get_task(token, KnowledgeTask)
    logger.info("Task question: %s", task.question)
    message = ctx.llm.complete([{"role": "user", "content": task.question}], tools=CHAT_TOOLS)
    if not message.tool_calls:
        raise NoAnswer("Model response does not contain tool calls.")
    call = message.tool_calls[0].function
    answer = KnowledgeTools(ctx.llm, session=ctx.session).handle(call.name, call.arguments)
    logger.debug("Answer: %s", answer)
    return answer
