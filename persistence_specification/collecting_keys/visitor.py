import typing

from persistence_specification.checks import Visitor, ReferenceCheck, ListCheck
from persistence_specification.mapping import key_of

ExpectedKeys = typing.Dict[str, typing.Any]


class KeyCollectingVisitor(Visitor):
    # referenced instances must still be attached to the saving session
    def __init__(self) -> None:
        self._keys: ExpectedKeys = {}

    @property
    def keys(self) -> ExpectedKeys:
        return self._keys

    def visit_reference(self, check: ReferenceCheck) -> None:
        self._keys[check.name] = key_of(check.value)

    def visit_list(self, check: ListCheck) -> None:
        self._keys[check.name] = sorted(key_of(item) for item in check.value)
