import abc
import typing

import attr


Comparer = typing.Callable[[typing.Any, typing.Any], bool]


class Visitor:
    def traverse(self, checks: typing.Iterable["Check"]) -> None:
        for check in checks:
            check.accept(self)

    def visit_property(self, check: "PropertyCheck") -> None:
        pass

    def visit_reference(self, check: "ReferenceCheck") -> None:
        pass

    def visit_list(self, check: "ListCheck") -> None:
        pass


@attr.s(auto_attribs=True)
class Check(abc.ABC):
    name: str
    value: typing.Any

    kind: typing.ClassVar[str] = ""

    @property
    def reusable(self) -> bool:
        return True

    def materialize(self) -> "Check":
        return self

    @abc.abstractmethod
    def accept(self, visitor: Visitor) -> None:
        pass


@attr.s(auto_attribs=True)
class PropertyCheck(Check):
    comparer: typing.Optional[Comparer] = None

    kind: typing.ClassVar[str] = "property"

    def accept(self, visitor: Visitor) -> None:
        visitor.visit_property(self)


@attr.s(auto_attribs=True)
class ReferenceCheck(Check):
    kind: typing.ClassVar[str] = "reference"

    @property
    def reusable(self) -> bool:
        # a saved instance keeps its identity after rollback and would not be inserted again
        return self.value is None or callable(self.value)

    def materialize(self) -> "ReferenceCheck":
        if callable(self.value):
            return attr.evolve(self, value=self.value())
        return self

    def accept(self, visitor: Visitor) -> None:
        visitor.visit_reference(self)


@attr.s(auto_attribs=True)
class ListCheck(Check):
    kind: typing.ClassVar[str] = "list"

    @property
    def reusable(self) -> bool:
        return callable(self.value) or not self.value

    def materialize(self) -> "ListCheck":
        if callable(self.value):
            return attr.evolve(self, value=list(self.value()))
        return self

    def accept(self, visitor: Visitor) -> None:
        visitor.visit_list(self)
