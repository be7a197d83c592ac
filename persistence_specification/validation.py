import typing

import attr
import inflection
from sqlalchemy import Column, String, TypeDecorator, inspect
from sqlalchemy.orm import ColumnProperty, Session


@attr.s(auto_attribs=True)
class ValidationFailure:
    property_name: str
    message: str


@attr.s(auto_attribs=True)
class EntityValidationResult:
    entity: typing.Any
    state: str
    errors: typing.List[ValidationFailure] = attr.Factory(list)


class EntityValidationError(Exception):
    def __init__(self, results: typing.List[EntityValidationResult]) -> None:
        self.results = results
        failures = sum(len(result.errors) for result in results)
        super().__init__(f"Validation failed for {len(results)} entities with {failures} errors")


def _is_required(column: Column) -> bool:
    return not (
        column.nullable
        or column.primary_key
        or column.foreign_keys
        or column.default is not None
        or column.server_default is not None
    )


def _underlying_type(column: Column) -> typing.Any:
    column_type = column.type
    while isinstance(column_type, TypeDecorator):
        column_type = getattr(column_type, "impl_instance", column_type.impl)
    return column_type


def _state_name(instance: typing.Any) -> str:
    state = inspect(instance)
    for name in ("transient", "pending", "persistent", "deleted", "detached"):
        if getattr(state, name):
            return name
    return "unknown"


def validate_instance(instance: typing.Any) -> EntityValidationResult:
    result = EntityValidationResult(instance, _state_name(instance))
    for prop in inspect(type(instance)).iterate_properties:
        if not isinstance(prop, ColumnProperty) or len(prop.columns) != 1:
            continue
        column = prop.columns[0]
        if not isinstance(column, Column):
            continue
        value = getattr(instance, prop.key)
        label = inflection.humanize(prop.key)

        if value is None and _is_required(column):
            result.errors.append(ValidationFailure(prop.key, f"The {label} field is required."))
        elif isinstance(value, str):
            column_type = _underlying_type(column)
            if isinstance(column_type, String) and column_type.length and len(value) > column_type.length:
                result.errors.append(
                    ValidationFailure(
                        prop.key,
                        f"The field {label} must be a string with a maximum length of {column_type.length}.",
                    )
                )
    return result


def validate_pending(session: Session) -> None:
    results = [validate_instance(instance) for instance in session.new]
    invalid = [result for result in results if result.errors]
    if invalid:
        raise EntityValidationError(invalid)
