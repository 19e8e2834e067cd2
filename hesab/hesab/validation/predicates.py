from __future__ import annotations

import logging
import math
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta, timezone
from typing import Any, Callable, Literal, Protocol, get_args
from urllib.parse import urlsplit

from .checksums import is_valid_national_id, is_valid_sheba
from .messages import add_rule_message, remove_rule_message

logger = logging.getLogger(__name__)


RuleName = Literal[
    "required",
    "nullable",
    "string",
    "numeric",
    "integer",
    "min",
    "max",
    "between",
    "email",
    "url",
    "date",
    "boolean",
    "array",
    "object",
    "confirmed",
    "regex",
    "in",
    "notIn",
    "phone",
    "nationalId",
    "postalCode",
    "sheba",
    "strongPassword",
    "afterToday",
    "beforeToday",
    "file",
    "image",
    "maxFileSize",
    "unique",
    "exists",
]

BUILTIN_RULES: frozenset[str] = frozenset(get_args(RuleName))


class RecordLookup(Protocol):
    """Row counter backing the ``unique`` and ``exists`` rules."""

    def count(self, table: str, column: str, value: Any, exclude_id: str | None = None) -> int: ...


@dataclass(frozen=True)
class RuleContext:
    field: str
    record: Mapping[str, Any] = field(default_factory=dict)
    get_value: Callable[[str], Any] = lambda _name: None
    lookup: RecordLookup | None = None


Params = tuple[str, ...]
PredicateFn = Callable[[Any, Params, RuleContext], bool]
ParamCheck = Callable[[Params], "str | None"]


# ---------------------------------------------------------------------------
# Value coercion (request bodies arrive as JSON, so numbers may be strings)
# ---------------------------------------------------------------------------

_NUMBER_RE = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")
_INT_PREFIX_RE = re.compile(r"\s*([+-]?[0-9]+)")
_FLOAT_PREFIX_RE = re.compile(r"\s*([+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?)")


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _to_float(value: int | float) -> float:
    """``float()`` that saturates to infinity for ints beyond the float range."""
    try:
        return float(value)
    except OverflowError:
        return math.inf if value > 0 else -math.inf


def to_number(value: Any) -> float:
    """Convert like a JSON client would: NaN when the value is not numeric."""
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    if _is_number(value):
        return _to_float(value)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return 0.0
        if text in ("Infinity", "+Infinity"):
            return math.inf
        if text == "-Infinity":
            return -math.inf
        if _NUMBER_RE.fullmatch(text):
            return float(text)
    return math.nan


def parse_int_param(param: str | None) -> float:
    """Leading-integer parse of a rule parameter (``"3.5"`` -> 3)."""
    if param is None:
        return math.nan
    m = _INT_PREFIX_RE.match(param)
    return _to_float(int(m.group(1))) if m else math.nan


def parse_float_param(param: str | None) -> float:
    if param is None:
        return math.nan
    m = _FLOAT_PREFIX_RE.match(param)
    return float(m.group(1)) if m else math.nan


def to_display_string(value: Any) -> str:
    """Stringify the way the browser client does (``True`` -> ``"true"``)."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        if value.is_integer():
            return str(int(value))
        return repr(value)
    if isinstance(value, (list, tuple)):
        return ",".join("" if v is None else to_display_string(v) for v in value)
    if isinstance(value, Mapping):
        return "[object Object]"
    return str(value)


_DATE_FORMATS = ("%Y/%m/%d", "%Y/%m/%d %H:%M", "%Y/%m/%d %H:%M:%S")
_MAX_EPOCH_MS = 8_640_000_000_000_000
_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def parse_date(value: Any) -> datetime | None:
    """Parse a date/time value; aware values are converted to local time."""
    parsed: datetime | None = None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime.combine(value, time())
    elif _is_number(value):
        # Epoch milliseconds name an instant; it is shown in local time below.
        if isinstance(value, float) and not math.isfinite(value):
            return None
        if abs(value) > _MAX_EPOCH_MS:
            return None
        try:
            parsed = _EPOCH + timedelta(milliseconds=value)
        except OverflowError:
            return None
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            for fmt in _DATE_FORMATS:
                try:
                    parsed = datetime.strptime(text, fmt)
                    break
                except ValueError:
                    continue
    if parsed is not None and parsed.tzinfo is not None:
        try:
            parsed = parsed.astimezone().replace(tzinfo=None)
        except (OverflowError, OSError, ValueError):
            return None
    return parsed


def _strict_equals(a: Any, b: Any) -> bool:
    if isinstance(a, bool) or isinstance(b, bool):
        return isinstance(a, bool) and isinstance(b, bool) and a == b
    if _is_number(a) or _is_number(b):
        return _is_number(a) and _is_number(b) and a == b
    return type(a) is type(b) and a == b


def _measure(value: Any, param: str | None) -> tuple[float, float] | None:
    """Return (measured, bound) for min/max, or None for unsupported kinds."""
    if isinstance(value, (str, list, tuple)):
        return float(len(value)), parse_int_param(param)
    if _is_number(value):
        return _to_float(value), parse_float_param(param)
    return None


# ---------------------------------------------------------------------------
# Predicates
# ---------------------------------------------------------------------------


def predicate_required(value: Any, params: Params, ctx: RuleContext) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return len(value.strip()) > 0
    if isinstance(value, (list, tuple, Mapping)):
        return len(value) > 0
    return True


def predicate_nullable(value: Any, params: Params, ctx: RuleContext) -> bool:
    # Marker rule; the validator skips the field's other rules when the value is None.
    return True


def predicate_string(value: Any, params: Params, ctx: RuleContext) -> bool:
    return isinstance(value, str)


def predicate_numeric(value: Any, params: Params, ctx: RuleContext) -> bool:
    return math.isfinite(to_number(value))


def predicate_integer(value: Any, params: Params, ctx: RuleContext) -> bool:
    number = to_number(value)
    return math.isfinite(number) and number.is_integer()


def predicate_min(value: Any, params: Params, ctx: RuleContext) -> bool:
    measured = _measure(value, params[0] if params else None)
    if measured is None:
        return False
    actual, bound = measured
    return actual >= bound


def predicate_max(value: Any, params: Params, ctx: RuleContext) -> bool:
    measured = _measure(value, params[0] if params else None)
    if measured is None:
        return False
    actual, bound = measured
    return actual <= bound


def predicate_between(value: Any, params: Params, ctx: RuleContext) -> bool:
    low = parse_float_param(params[0] if params else None)
    high = parse_float_param(params[1] if len(params) > 1 else None)
    if isinstance(value, (str, list, tuple)):
        actual = float(len(value))
    elif _is_number(value):
        actual = _to_float(value)
    else:
        return False
    return low <= actual <= high


_EMAIL_RE = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")


def predicate_email(value: Any, params: Params, ctx: RuleContext) -> bool:
    return isinstance(value, str) and _EMAIL_RE.fullmatch(value) is not None


_SCHEME_RE = re.compile(r"[A-Za-z][A-Za-z0-9+.\-]*")
_NETWORK_SCHEMES = frozenset({"http", "https", "ftp", "ws", "wss", "file"})


def predicate_url(value: Any, params: Params, ctx: RuleContext) -> bool:
    if not isinstance(value, str):
        return False
    text = value.strip()
    try:
        parts = urlsplit(text)
        parts.port  # raises ValueError for an out-of-range port
    except ValueError:
        return False
    if not parts.scheme or not _SCHEME_RE.fullmatch(parts.scheme):
        return False
    if any(ch.isspace() for ch in parts.netloc):
        return False
    if parts.scheme.lower() in _NETWORK_SCHEMES:
        return bool(parts.netloc) or parts.scheme.lower() == "file"
    return bool(parts.netloc or parts.path)


def predicate_date(value: Any, params: Params, ctx: RuleContext) -> bool:
    return parse_date(value) is not None


def predicate_boolean(value: Any, params: Params, ctx: RuleContext) -> bool:
    if isinstance(value, bool):
        return True
    if isinstance(value, str):
        return value in ("true", "false")
    return _is_number(value) and value in (0, 1)


def predicate_array(value: Any, params: Params, ctx: RuleContext) -> bool:
    return isinstance(value, (list, tuple))


def predicate_object(value: Any, params: Params, ctx: RuleContext) -> bool:
    return isinstance(value, Mapping)


def predicate_confirmed(value: Any, params: Params, ctx: RuleContext) -> bool:
    confirm_field = (params[0] if params else "") or f"{ctx.field}_confirmation"
    return _strict_equals(value, ctx.get_value(confirm_field))


def predicate_regex(value: Any, params: Params, ctx: RuleContext) -> bool:
    # Parameters are comma-split upstream; a pattern like ``\d{1,3}`` is rejoined.
    pattern = ",".join(params)
    try:
        return re.search(pattern, to_display_string(value)) is not None
    except re.error:
        return False


def predicate_in(value: Any, params: Params, ctx: RuleContext) -> bool:
    return to_display_string(value) in params


def predicate_not_in(value: Any, params: Params, ctx: RuleContext) -> bool:
    return to_display_string(value) not in params


_PHONE_RE = re.compile(r"(?:\+98|0)?9[0-9]{9}")
_POSTAL_CODE_RE = re.compile(r"[0-9]{10}")
_SEPARATORS_RE = re.compile(r"[\s-]")


def predicate_phone(value: Any, params: Params, ctx: RuleContext) -> bool:
    return isinstance(value, str) and _PHONE_RE.fullmatch(_SEPARATORS_RE.sub("", value)) is not None


def predicate_national_id(value: Any, params: Params, ctx: RuleContext) -> bool:
    return is_valid_national_id(value)


def predicate_postal_code(value: Any, params: Params, ctx: RuleContext) -> bool:
    return isinstance(value, str) and _POSTAL_CODE_RE.fullmatch(_SEPARATORS_RE.sub("", value)) is not None


def predicate_sheba(value: Any, params: Params, ctx: RuleContext) -> bool:
    return is_valid_sheba(value)


def predicate_strong_password(value: Any, params: Params, ctx: RuleContext) -> bool:
    if not value or not isinstance(value, str):
        return False
    return (
        len(value) >= 8
        and re.search(r"[a-z]", value) is not None
        and re.search(r"[A-Z]", value) is not None
        and re.search(r"[0-9]", value) is not None
        and re.search(r"[^A-Za-z0-9]", value) is not None
    )


def predicate_after_today(value: Any, params: Params, ctx: RuleContext) -> bool:
    parsed = parse_date(value)
    if parsed is None:
        return False
    start_of_today = datetime.combine(date.today(), time.min)
    return parsed > start_of_today


def predicate_before_today(value: Any, params: Params, ctx: RuleContext) -> bool:
    parsed = parse_date(value)
    if parsed is None:
        return False
    end_of_today = datetime.combine(date.today(), time.max)
    return parsed < end_of_today


def _file_attr(value: Any, name: str) -> Any:
    if isinstance(value, Mapping):
        return value.get(name)
    return getattr(value, name, None)


def predicate_file(value: Any, params: Params, ctx: RuleContext) -> bool:
    if value is None or isinstance(value, (str, bytes, int, float, list, tuple)):
        return False
    return _file_attr(value, "size") is not None


IMAGE_TYPES = ("image/jpeg", "image/png", "image/gif", "image/webp")


def predicate_image(value: Any, params: Params, ctx: RuleContext) -> bool:
    return predicate_file(value, params, ctx) and _file_attr(value, "type") in IMAGE_TYPES


def predicate_max_file_size(value: Any, params: Params, ctx: RuleContext) -> bool:
    if not predicate_file(value, params, ctx):
        return False
    size = to_number(_file_attr(value, "size"))
    limit_kb = parse_int_param(params[0] if params else None)
    return size <= limit_kb * 1024


def predicate_unique(value: Any, params: Params, ctx: RuleContext) -> bool:
    if ctx.lookup is None:
        return True
    if len(params) < 2:
        return False
    table, column = params[0], params[1]
    exclude_id = params[2] if len(params) > 2 and params[2] else None
    return ctx.lookup.count(table, column, value, exclude_id) == 0


def predicate_exists(value: Any, params: Params, ctx: RuleContext) -> bool:
    if ctx.lookup is None:
        return True
    if len(params) < 2:
        return False
    return ctx.lookup.count(params[0], params[1], value) > 0


# ---------------------------------------------------------------------------
# Parameter checks (used by strict compilation)
# ---------------------------------------------------------------------------


def _numeric_params(count: int) -> ParamCheck:
    def check(params: Params) -> str | None:
        if len(params) < count:
            return f"expects {count} numeric parameter(s), got {len(params)}"
        for p in params[:count]:
            if math.isnan(parse_float_param(p)):
                return f"parameter {p!r} is not numeric"
        return None

    return check


def _at_least(count: int) -> ParamCheck:
    def check(params: Params) -> str | None:
        if len([p for p in params if p]) < count:
            return f"expects at least {count} parameter(s)"
        return None

    return check


def _check_regex(params: Params) -> str | None:
    if not params or not any(params):
        return "expects a pattern"
    try:
        re.compile(",".join(params))
    except re.error as e:
        return f"invalid pattern: {e}"
    return None


PREDICATES: dict[str, PredicateFn] = {
    "required": predicate_required,
    "nullable": predicate_nullable,
    "string": predicate_string,
    "numeric": predicate_numeric,
    "integer": predicate_integer,
    "min": predicate_min,
    "max": predicate_max,
    "between": predicate_between,
    "email": predicate_email,
    "url": predicate_url,
    "date": predicate_date,
    "boolean": predicate_boolean,
    "array": predicate_array,
    "object": predicate_object,
    "confirmed": predicate_confirmed,
    "regex": predicate_regex,
    "in": predicate_in,
    "notIn": predicate_not_in,
    "phone": predicate_phone,
    "nationalId": predicate_national_id,
    "postalCode": predicate_postal_code,
    "sheba": predicate_sheba,
    "strongPassword": predicate_strong_password,
    "afterToday": predicate_after_today,
    "beforeToday": predicate_before_today,
    "file": predicate_file,
    "image": predicate_image,
    "maxFileSize": predicate_max_file_size,
    "unique": predicate_unique,
    "exists": predicate_exists,
}

PARAM_CHECKS: dict[str, ParamCheck] = {
    "min": _numeric_params(1),
    "max": _numeric_params(1),
    "between": _numeric_params(2),
    "maxFileSize": _numeric_params(1),
    "regex": _check_regex,
    "in": _at_least(1),
    "notIn": _at_least(1),
    "unique": _at_least(2),
    "exists": _at_least(2),
}

RULE_EXPLANATIONS: dict[str, str] = {
    "required": "Value must be present: not null, not blank after trimming, not an empty list or object.",
    "nullable": "Marker: when the value is null or missing, the field's other rules are skipped.",
    "string": "Value must be text.",
    "numeric": "Value must convert to a finite number (`\"12.5\"` passes, `\"abc\"` fails).",
    "integer": "Value must convert to a whole number.",
    "min": "`min:n` - text length, number value or list size must be at least n.",
    "max": "`max:n` - text length, number value or list size must be at most n.",
    "between": "`between:a,b` - text length, number value or list size must lie in [a, b].",
    "email": "Value must look like `local@domain.tld`.",
    "url": "Value must be an absolute URL with a scheme.",
    "date": "Value must parse as a calendar date or date/time (ISO 8601 or `YYYY/MM/DD`).",
    "boolean": "Value must be true/false, the strings \"true\"/\"false\", or 0/1.",
    "array": "Value must be a list.",
    "object": "Value must be an object (lists excluded).",
    "confirmed": "`confirmed[:other]` - value must equal `<field>_confirmation` (or the named field).",
    "regex": "`regex:pattern` - value must contain a match of the pattern.",
    "in": "`in:a,b,c` - value must be one of the listed options.",
    "notIn": "`notIn:a,b,c` - value must not be one of the listed options.",
    "phone": "Iranian mobile number: optional +98 or 0 prefix, then 9 and nine digits. Spaces and hyphens are ignored.",
    "nationalId": "Iranian national ID: 10 digits with a valid mod-11 check digit; repeated-digit IDs are rejected.",
    "postalCode": "Iranian postal code: 10 digits after removing spaces and hyphens.",
    "sheba": "Iranian IBAN: IR followed by 24 digits with a valid mod-97 checksum.",
    "strongPassword": "At least 8 characters with lower case, upper case, a digit and a symbol.",
    "afterToday": "Date must be later than the start of today.",
    "beforeToday": "Date must be earlier than the end of today.",
    "file": "Value must be an uploaded file (an object with a size).",
    "image": "Value must be a JPEG, PNG, GIF or WebP file.",
    "maxFileSize": "`maxFileSize:kb` - uploaded file may not exceed the given kilobytes.",
    "unique": "`unique:table,column[,except_id]` - no other row may hold this value.",
    "exists": "`exists:table,column` - a row with this value must exist.",
}


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


def register_rule(
    name: str,
    predicate: PredicateFn,
    *,
    message: str | None = None,
    explanation: str | None = None,
    param_check: ParamCheck | None = None,
) -> None:
    """
    Register a custom rule by name.

    Args:
        name: Rule name as used in rule strings (e.g. "iranianPlate")
        predicate: Callable (value, params, ctx) -> bool
        message: Default message template (may use :field, :min, :max, :value)
        explanation: Text shown by ``hesab explain``
        param_check: Strict-mode parameter validator returning an error or None
    """
    name = name.strip()
    if not name or any(ch in name for ch in "|:,"):
        raise ValueError(f"Invalid rule name: {name!r}")
    if name in BUILTIN_RULES:
        raise ValueError(f"Cannot replace built-in rule {name!r}")

    PREDICATES[name] = predicate
    if message is not None:
        add_rule_message(name, message)
    if explanation is not None:
        RULE_EXPLANATIONS[name] = explanation
    if param_check is not None:
        PARAM_CHECKS[name] = param_check
    logger.debug("Registered validation rule %s", name)


def unregister_rule(name: str) -> None:
    """Remove a custom rule. Built-in rules cannot be removed."""
    if name in BUILTIN_RULES:
        raise ValueError(f"Cannot remove built-in rule {name!r}")
    PREDICATES.pop(name, None)
    PARAM_CHECKS.pop(name, None)
    RULE_EXPLANATIONS.pop(name, None)
    remove_rule_message(name)


def get_rule(name: str) -> PredicateFn | None:
    return PREDICATES.get(name)


def list_rules() -> list[str]:
    """Built-in rules in catalog order, then custom rules in registration order."""
    builtins = list(get_args(RuleName))
    return builtins + [n for n in PREDICATES if n not in BUILTIN_RULES]
