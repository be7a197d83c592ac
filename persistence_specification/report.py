import typing

import attr


class MappingVerificationFailed(AssertionError):
    pass


@attr.s(auto_attribs=True)
class CheckOutcome:
    kind: str
    name: str
    expected: typing.Any
    actual: typing.Any
    succeeded: bool

    def describe(self) -> str:
        verdict = "Assertion Succeeded!" if self.succeeded else "Assertion failed!"
        return f"{verdict} Expected: {self.expected} Actual: {self.actual}"


@attr.s(auto_attribs=True)
class VerificationReport:
    entity: typing.Type
    outcomes: typing.List[CheckOutcome] = attr.Factory(list)
    error: typing.Optional[BaseException] = None

    @property
    def failures(self) -> typing.List[CheckOutcome]:
        return [outcome for outcome in self.outcomes if not outcome.succeeded]

    @property
    def succeeded(self) -> bool:
        return self.error is None and not self.failures

    def assert_succeeded(self) -> None:
        if self.error is not None:
            raise MappingVerificationFailed(f"{self.entity.__name__}: {self.error}") from self.error
        if self.failures:
            lines = [f"{outcome.kind} {outcome.name}: {outcome.describe()}" for outcome in self.failures]
            raise MappingVerificationFailed("\n".join([f"{self.entity.__name__} mapping mismatch:", *lines]))
