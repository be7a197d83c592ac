import typing

from persistence_specification.checks import Visitor, PropertyCheck, ReferenceCheck, ListCheck
from persistence_specification.collecting_keys.visitor import ExpectedKeys
from persistence_specification.mapping import key_of
from persistence_specification.report import CheckOutcome
from persistence_specification.utils.logging import get_logger, green, red

logger = get_logger("asserting")


class AssertingVisitor(Visitor):
    def __init__(self, actual: typing.Any, expected_keys: ExpectedKeys) -> None:
        self._actual = actual
        self._expected_keys = expected_keys
        self._outcomes: typing.List[CheckOutcome] = []

    @property
    def outcomes(self) -> typing.List[CheckOutcome]:
        return self._outcomes

    def visit_property(self, check: PropertyCheck) -> None:
        logger.info("Verifying property value of %s was sent to db", check.name)
        actual_value = getattr(self._actual, check.name)
        comparer = check.comparer or _equals
        self._record(check, check.value, actual_value, comparer(check.value, actual_value))

    def visit_reference(self, check: ReferenceCheck) -> None:
        logger.info("Verifying reference value of %s was sent to db", check.name)
        actual_value = getattr(self._actual, check.name)
        expected_key = self._expected_keys[check.name]
        self._record(check, check.value, actual_value, key_of(actual_value) == expected_key)

    def visit_list(self, check: ListCheck) -> None:
        logger.info("Verifying list value of %s was sent to db", check.name)
        actual_items = list(getattr(self._actual, check.name))
        actual_keys = sorted(key_of(item) for item in actual_items)
        self._record(check, check.value, actual_items, actual_keys == self._expected_keys[check.name])

    def _record(self, check: typing.Any, expected: typing.Any, actual: typing.Any, succeeded: bool) -> None:
        outcome = CheckOutcome(check.kind, check.name, expected, actual, succeeded)
        if succeeded:
            green(logger, outcome.describe())
        else:
            red(logger, outcome.describe())
        self._outcomes.append(outcome)


def _equals(expected: typing.Any, actual: typing.Any) -> bool:
    return expected == actual
