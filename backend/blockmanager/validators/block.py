# blockmanager/validators/block.py
from __future__ import annotations

from typing import Any, Callable, Dict, List, Mapping

from blockmanager.utils.themes import languages_list, region_exists

Errors = Dict[str, str]
HandlerValidator = Callable[[Mapping[str, Any]], Errors]

ALLOWED_VISIBILITY = {"except", "only"}

# Extra rules contributed by the plugins owning non-custom blocks
_handler_validators: Dict[str, List[HandlerValidator]] = {}


def handler_validator(handler: str):
    """
    Register extra validation for blocks of the given handler.

    The decorated function receives the reconciled record and returns a
    field -> message mapping (empty when valid).
    """
    def decorator(fn: HandlerValidator) -> HandlerValidator:
        _handler_validators.setdefault(handler, []).append(fn)
        return fn
    return decorator


def clear_handler_validators() -> None:
    _handler_validators.clear()


def _is_optional_text(value: Any) -> bool:
    return value is None or isinstance(value, str)


def _required_text(record: Mapping[str, Any], field: str, new_record: bool) -> bool:
    """
    Whether `field` fails its presence rule.

    New records must carry a non-blank value; existing records only when the
    field is submitted at all.
    """
    if not new_record and field not in record:
        return False
    value = record.get(field)
    return not isinstance(value, str) or not value.strip()


def _validate_default(record: Mapping[str, Any], new_record: bool = True) -> Errors:
    errors: Errors = {}

    title = record.get("title")
    if _required_text(record, "title", new_record):
        errors["title"] = "Title is required"
    elif isinstance(title, str) and len(title) > 200:
        errors["title"] = "Title must be at most 200 characters"

    for field in ("description", "body", "pages"):
        if not _is_optional_text(record.get(field)):
            errors[field] = f"{field.capitalize()} must be text"

    status = record.get("status")
    if status is not None and not isinstance(status, bool):
        errors["status"] = "Status must be true or false"

    visibility = record.get("visibility")
    if visibility is not None and (not isinstance(visibility, str) or visibility not in ALLOWED_VISIBILITY):
        errors["visibility"] = "Visibility must be one of: except, only"

    locale = record.get("locale")
    if locale is not None:
        languages = languages_list()
        if not isinstance(locale, list) or any(
            not isinstance(code, str) or code not in languages for code in locale
        ):
            errors["locale"] = "Invalid language selection"

    roles = record.get("roles")
    if roles is not None and (
        not isinstance(roles, list) or any(not isinstance(role_id, str) for role_id in roles)
    ):
        errors["roles"] = "Roles must be a list of role ids"

    if not isinstance(record.get("settings", {}), Mapping):
        errors["settings"] = "Settings must be a mapping"

    for assignment in record.get("region", []):
        theme, region = assignment["theme"], assignment["region"]
        if region is None or region == "":
            continue
        if not isinstance(theme, str) or not isinstance(region, str) or not region_exists(theme, region):
            errors["region"] = f"Invalid region {region!r} for theme {theme!r}"
            break

    return errors


def _validate_custom(record: Mapping[str, Any], new_record: bool = True) -> Errors:
    errors = _validate_default(record, new_record)

    if _required_text(record, "body", new_record):
        errors["body"] = "Body is required"

    return errors


RULESETS: Dict[str, Callable[[Mapping[str, Any], bool], Errors]] = {
    "default": _validate_default,
    "custom": _validate_custom,
}


def validate_block(
    record: Mapping[str, Any],
    ruleset: str = "default",
    handler: str | None = None,
    new_record: bool = True,
) -> Errors:
    """
    Validate a reconciled block record.

    Returns field -> message; an empty mapping means the record is valid.
    With `new_record=False` (edits) title and body are only required when
    submitted. Rules registered for `handler` run after the ruleset and may
    add or override messages.
    """
    if ruleset not in RULESETS:
        raise ValueError(f"Unknown validation ruleset: {ruleset}")

    errors = RULESETS[ruleset](record, new_record)

    for validator in _handler_validators.get(handler or "", []):
        errors.update(validator(record) or {})

    return errors
