"""
Error message catalogs.

Templates interpolate ``:field``, ``:min``, ``:max`` and ``:value``.
Lookup order for a failing rule: ``"<field>.<rule>"`` override (also tried
with the wildcard pattern the field came from), ``"<rule>"``
override, locale catalog, messages registered with custom rules, generic
fallback.
"""

from __future__ import annotations

from collections.abc import Mapping

from .schema import RuleDescriptor

DEFAULT_LOCALE = "en"

ENGLISH_MESSAGES: dict[str, str] = {
    "required": ":field is required",
    "string": ":field must be text",
    "numeric": ":field must be a number",
    "integer": ":field must be an integer",
    "email": ":field must be a valid email address",
    "min": ":field must be at least :min",
    "max": ":field must be at most :max",
    "between": ":field must be between :min and :max",
    "phone": ":field must be a valid mobile number",
    "nationalId": ":field must be a valid national ID",
    "postalCode": ":field must be a valid postal code",
    "sheba": ":field must be a valid Sheba number",
    "url": ":field must be a valid URL",
    "date": ":field must be a valid date",
    "boolean": ":field must be true or false",
    "array": ":field must be a list",
    "object": ":field must be an object",
    "confirmed": ":field confirmation does not match",
    "unique": ":field has already been taken",
    "exists": "selected :field is invalid",
    "regex": ":field format is invalid",
    "in": "selected :field is invalid",
    "notIn": "selected :field is not allowed",
    "strongPassword": ":field must contain upper and lower case letters, a digit and a symbol",
    "afterToday": ":field must be a date in the future",
    "beforeToday": ":field must be a date in the past",
    "file": ":field must be a file",
    "image": ":field must be an image",
    "maxFileSize": ":field may not be larger than :max kilobytes",
}

PERSIAN_MESSAGES: dict[str, str] = {
    "required": ":field الزامی است",
    "string": ":field باید متن باشد",
    "numeric": ":field باید عدد باشد",
    "integer": ":field باید عدد صحیح باشد",
    "email": ":field باید ایمیل معتبر باشد",
    "min": ":field باید حداقل :min کاراکتر باشد",
    "max": ":field باید حداکثر :max کاراکتر باشد",
    "between": ":field باید بین :min تا :max کاراکتر باشد",
    "phone": ":field باید شماره تلفن معتبر باشد",
    "nationalId": ":field باید کد ملی معتبر باشد",
    "postalCode": ":field باید کد پستی معتبر باشد",
    "sheba": ":field باید شماره شبای معتبر باشد",
    "url": ":field باید آدرس اینترنتی معتبر باشد",
    "date": ":field باید تاریخ معتبر باشد",
    "boolean": ":field باید true یا false باشد",
    "array": ":field باید آرایه باشد",
    "object": ":field باید شی باشد",
    "confirmed": ":field با تایید آن مطابقت ندارد",
    "unique": ":field قبلاً استفاده شده است",
    "exists": ":field انتخاب شده معتبر نیست",
    "regex": "فرمت :field نامعتبر است",
    "in": ":field انتخاب شده معتبر نیست",
    "notIn": ":field انتخاب شده مجاز نیست",
    "strongPassword": ":field باید شامل حروف بزرگ، کوچک، عدد و کاراکتر خاص باشد",
    "afterToday": ":field باید تاریخی در آینده باشد",
    "beforeToday": ":field باید تاریخی در گذشته باشد",
    "file": ":field باید فایل معتبر باشد",
    "image": ":field باید تصویر معتبر باشد",
    "maxFileSize": ":field نباید بیشتر از :max کیلوبایت باشد",
}

CATALOGS: dict[str, dict[str, str]] = {
    "en": ENGLISH_MESSAGES,
    "fa": PERSIAN_MESSAGES,
}

FALLBACK_MESSAGES: dict[str, str] = {
    "en": ":field is invalid",
    "fa": ":field نامعتبر است",
}

# Default templates for rules added through register_rule().
_REGISTERED_MESSAGES: dict[str, str] = {}


def add_rule_message(rule: str, template: str) -> None:
    _REGISTERED_MESSAGES[rule] = template


def remove_rule_message(rule: str) -> None:
    _REGISTERED_MESSAGES.pop(rule, None)


def interpolate(template: str, field: str, rule: RuleDescriptor) -> str:
    params = rule.params
    first = params[0] if params else ""
    upper = params[1] if rule.name == "between" and len(params) > 1 else first
    return (
        template.replace(":field", field)
        .replace(":min", first)
        .replace(":max", upper)
        .replace(":value", first)
    )


def format_message(
    field: str,
    rule: RuleDescriptor,
    *,
    custom: Mapping[str, str] | None = None,
    locale: str = DEFAULT_LOCALE,
    pattern: str | None = None,
) -> str:
    """Resolve and interpolate the message for a failing rule.

    ``pattern`` is the RuleSpec key a wildcard field was expanded from, so an
    override for ``items.*.qty.required`` applies to ``items.3.qty``.
    """
    custom = custom or {}
    template = custom.get(f"{field}.{rule.name}")
    if template is None and pattern is not None:
        template = custom.get(f"{pattern}.{rule.name}")
    if template is None:
        template = custom.get(rule.name)
    if template is None:
        catalog = CATALOGS.get(locale, ENGLISH_MESSAGES)
        template = catalog.get(rule.name) or _REGISTERED_MESSAGES.get(rule.name)
    if template is None:
        template = FALLBACK_MESSAGES.get(locale, FALLBACK_MESSAGES[DEFAULT_LOCALE])
    return interpolate(template, field, rule)
