"""
Валидация запросов к /api/products.

Каждый маршрут получает упорядоченный список правил. Правило смотрит
одно поле (path-параметр или поле JSON-тела) и возвращает ноль или одну
ошибку. Выполняются все правила, ошибки копятся; непустой список
превращается в 400 {errors: [...]} ещё до вызова обработчика.

Проверки работают со строковым представлением значения, как это делает
express-validator: 200 -> "200", true -> "true", отсутствующее поле -> "".
"""
from __future__ import annotations

import json
import math
import re
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Sequence

from starlette.requests import Request

from src.common.errors import MISSING, FieldError, RequestValidationFailed

_INT_RE = re.compile(r"^[-+]?[0-9]+$")
_NUMERIC_RE = re.compile(r"^[+-]?([0-9]*[.])?[0-9]+$")
# грамматика StringToNumber из JS (без hex и Infinity)
_JS_NUMBER_RE = re.compile(r"^[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?$")
_BOOLEAN_STRINGS = ("true", "false", "1", "0")
_TRUE_STRINGS = ("true", "1")


@dataclass
class RequestData:
    params: Dict[str, Any] = field(default_factory=dict)
    body: Dict[str, Any] = field(default_factory=dict)

    def get(self, location: str, name: str) -> Any:
        source = self.params if location == "params" else self.body
        return source.get(name, MISSING)


Validator = Callable[[RequestData], List[FieldError]]
Check = Callable[[Any], bool]


# ---------- приведение значений ----------

def to_string(value: Any) -> str:
    if value is MISSING or value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    return str(value)


def to_number(value: Any) -> float:
    """Числовое приведение в духе JS: null -> 0, "" -> 0, мусор и не конечные -> NaN."""
    if value is MISSING:
        return math.nan
    if value is None:
        return 0.0
    if isinstance(value, str):
        s = value.strip()
        if not s:
            return 0.0
        if not _JS_NUMBER_RE.match(s):
            return math.nan
        value = s
    elif not isinstance(value, (bool, int, float)):
        return math.nan
    try:
        number = float(value)
    except OverflowError:
        return math.nan
    return number if math.isfinite(number) else math.nan


# ---------- проверки ----------

def is_int(value: Any) -> bool:
    return bool(_INT_RE.match(to_string(value)))


def not_empty(value: Any) -> bool:
    return to_string(value) != ""


def is_numeric(value: Any) -> bool:
    return bool(_NUMERIC_RE.match(to_string(value)))


def is_boolean(value: Any) -> bool:
    return to_string(value) in _BOOLEAN_STRINGS


def greater_than_zero(value: Any) -> bool:
    # NaN > 0 -> False
    return to_number(value) > 0


# ---------- правила ----------

def rule(location: str, name: str, check: Check, message: str) -> Validator:
    def validator(data: RequestData) -> List[FieldError]:
        value = data.get(location, name)
        if check(value):
            return []
        return [FieldError(field=name, message=message, location=location, value=value)]

    validator.__name__ = f"{location}_{name}_{check.__name__}"
    return validator


def param(name: str, check: Check, message: str) -> Validator:
    return rule("params", name, check, message)


def body(name: str, check: Check, message: str) -> Validator:
    return rule("body", name, check, message)


def run_validators(validators: Sequence[Validator], data: RequestData) -> List[FieldError]:
    errors: List[FieldError] = []
    for validator in validators:
        errors.extend(validator(data))
    return errors


ID_RULES: List[Validator] = [
    param("id", is_int, "Invalid Id"),
]

CREATE_RULES: List[Validator] = [
    body("name", not_empty, "product name is required"),
    body("price", is_numeric, "Value no validate"),
    body("price", not_empty, "product name is required"),
    body("price", greater_than_zero, "Invalid price"),
]

UPDATE_RULES: List[Validator] = ID_RULES + [
    body("name", not_empty, "product name is required"),
    body("price", is_numeric, "Invalid value"),
    body("price", not_empty, "price is required"),
    body("price", greater_than_zero, "Invalid price"),
    body("availability", is_boolean, "Invalid availability"),
    body("availability", not_empty, "availability is required"),
]


# ---------- зависимость FastAPI ----------

def _reject_constant(name: str) -> Any:
    # NaN / Infinity / -Infinity не входят в JSON
    raise ValueError(f"Unexpected token {name}")


async def read_json_body(request: Request) -> Dict[str, Any]:
    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        payload = json.loads(raw, parse_constant=_reject_constant)
    except ValueError:
        raise RequestValidationFailed(
            [FieldError(field="body", message="Invalid JSON body", location="body")]
        )
    return payload if isinstance(payload, dict) else {}


def validate_request(validators: Sequence[Validator]) -> Callable[[Request], Awaitable[RequestData]]:
    """Dependency: прогоняет цепочку и отдаёт данные запроса обработчику."""
    chain = list(validators)

    async def dependency(request: Request) -> RequestData:
        data = RequestData(params=dict(request.path_params), body=await read_json_body(request))
        errors = run_validators(chain, data)
        if errors:
            raise RequestValidationFailed(errors)
        return data

    return dependency


# ---------- значения после валидации ----------

def product_id(data: RequestData) -> int:
    return int(to_string(data.params["id"]))


def create_fields(data: RequestData) -> Dict[str, Any]:
    return {
        "name": to_string(data.body["name"]),
        "price": to_number(data.body["price"]),
    }


def update_fields(data: RequestData) -> Dict[str, Any]:
    fields = create_fields(data)
    fields["availability"] = to_string(data.body["availability"]) in _TRUE_STRINGS
    return fields
