import typing

from persistence_specification.checks import Visitor, PropertyCheck, ReferenceCheck, ListCheck
from persistence_specification.utils.logging import get_logger

logger = get_logger("populating")


class PopulatingVisitor(Visitor):
    def __init__(self, instance: typing.Any) -> None:
        self._instance = instance

    def visit_property(self, check: PropertyCheck) -> None:
        self._set(check.name, check.value)

    def visit_reference(self, check: ReferenceCheck) -> None:
        self._set(check.name, check.value)

    def visit_list(self, check: ListCheck) -> None:
        self._set(check.name, list(check.value))

    def _set(self, name: str, value: typing.Any) -> None:
        logger.info("Setting value %s on property %s", value, name)
        setattr(self._instance, name, value)
