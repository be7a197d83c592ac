import enum
import functools
import typing
from contextlib import contextmanager

from sqlalchemy import select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import DBAPIError
from sqlalchemy.orm import Session

from persistence_specification.asserting.visitor import AssertingVisitor
from persistence_specification.checks import Check, Comparer, ListCheck, PropertyCheck, ReferenceCheck
from persistence_specification.collecting_keys.visitor import KeyCollectingVisitor
from persistence_specification.mapping import (
    Attribute,
    NotAProperty,
    column_attribute,
    key_attributes,
    key_of,
    mapper_of,
    relationship_attribute,
)
from persistence_specification.populating.visitor import PopulatingVisitor
from persistence_specification.report import VerificationReport
from persistence_specification.utils.logging import get_logger, green, red
from persistence_specification.validation import EntityValidationError, validate_pending

logger = get_logger("specification")

EntityType = typing.TypeVar("EntityType")
SessionOpener = typing.Callable[[], Session]


class Cleanup(enum.Enum):
    ROLLBACK = "rollback"
    DELETE = "delete"


class EntityNotFound(LookupError):
    pass


class SpecificationAlreadyVerified(RuntimeError):
    pass


def base_exception(exception: BaseException) -> BaseException:
    current = exception
    seen = {id(current)}
    while True:
        if isinstance(current, DBAPIError) and current.orig is not None:
            return current.orig
        inner = current.__cause__ or current.__context__
        if inner is None or id(inner) in seen:
            return current
        seen.add(id(inner))
        current = inner


def _format_key(key: tuple) -> str:
    if len(key) == 1:
        return str(key[0])
    return ", ".join(str(part) for part in key)


class PersistenceSpecification(typing.Generic[EntityType]):
    def __init__(
        self,
        entity: typing.Type[EntityType],
        bind: Engine,
        session_factory: typing.Callable[..., Session] = Session,
        cleanup: Cleanup = Cleanup.ROLLBACK,
        construct: typing.Optional[typing.Callable[[], EntityType]] = None,
    ) -> None:
        mapper_of(entity)
        self._entity = entity
        self._bind = bind
        self._session_factory = session_factory
        self._cleanup = cleanup
        self._construct = construct or entity
        self._checks: typing.List[Check] = []
        self._key_names: typing.Optional[typing.Tuple[str, ...]] = None
        self._verified = False

    @property
    def checks(self) -> typing.List[Check]:
        return list(self._checks)

    @property
    def key_names(self) -> typing.Tuple[str, ...]:
        return self._key_names or key_attributes(self._entity)

    def check_property(
        self, attribute: Attribute, value: typing.Any, comparer: typing.Optional[Comparer] = None
    ) -> "PersistenceSpecification[EntityType]":
        self._checks.append(PropertyCheck(column_attribute(self._entity, attribute), value, comparer))
        return self

    def check_reference(
        self, attribute: Attribute, value: typing.Union[typing.Any, typing.Callable[[], typing.Any]]
    ) -> "PersistenceSpecification[EntityType]":
        self._checks.append(ReferenceCheck(relationship_attribute(self._entity, attribute, collection=False), value))
        return self

    def check_list(
        self,
        attribute: Attribute,
        values: typing.Union[typing.Iterable[typing.Any], typing.Callable[[], typing.Iterable[typing.Any]]],
    ) -> "PersistenceSpecification[EntityType]":
        name = relationship_attribute(self._entity, attribute, collection=True)
        self._checks.append(ListCheck(name, values if callable(values) else list(values)))
        return self

    def with_key(self, *attributes: Attribute) -> "PersistenceSpecification[EntityType]":
        if not attributes:
            raise NotAProperty(f"No key attribute given for {self._entity.__name__}")
        self._key_names = tuple(column_attribute(self._entity, attribute) for attribute in attributes)
        return self

    def verify_mappings(self) -> VerificationReport:
        if self._verified:
            spent = [check.name for check in self._checks if not check.reusable]
            if spent:
                names = ", ".join(spent)
                raise SpecificationAlreadyVerified(
                    f"{self._entity.__name__} was verified already, pass factories for {names} to verify again"
                )
        self._verified = True
        report = VerificationReport(self._entity)
        try:
            with self._scope() as open_session:
                self._run(open_session, report)
        except EntityValidationError as error:
            report.error = error
            for result in error.results:
                red(
                    logger,
                    'Entity of type "%s" in state "%s" has the following validation errors:',
                    type(result.entity).__name__,
                    result.state,
                )
                for failure in result.errors:
                    red(logger, '- Property: "%s", Error: "%s"', failure.property_name, failure.message)
            red(logger, "Rolling back all transactions")
        except Exception as error:
            report.error = error
            red(logger, "Error: %s", base_exception(error))
            red(logger, "Rolling back all transactions")
        else:
            green(logger, "Rolling back all transactions")
        return report

    @contextmanager
    def _scope(self) -> typing.Generator[SessionOpener, None, None]:
        if self._cleanup is Cleanup.DELETE:
            yield functools.partial(self._open_session, self._bind)
            return

        connection = self._bind.connect()
        transaction = connection.begin()
        try:
            yield functools.partial(self._open_session, connection)
        finally:
            # a failed session may already have rolled the transaction back
            if transaction.is_active:
                transaction.rollback()
            connection.close()

    def _open_session(self, bind: typing.Any) -> Session:
        return self._session_factory(bind=bind, expire_on_commit=False)

    def _run(self, open_session: SessionOpener, report: VerificationReport) -> None:
        checks = [check.materialize() for check in self._checks]

        with open_session() as session:
            expected = self._create()
            PopulatingVisitor(expected).traverse(checks)
            key = self._save(session, expected)
            collecting = KeyCollectingVisitor()
            collecting.traverse(checks)

        with open_session() as session:
            actual = self._reload(session, key)
            visitor = AssertingVisitor(actual, collecting.keys)
            visitor.traverse(checks)
            report.outcomes.extend(visitor.outcomes)

        if self._cleanup is Cleanup.DELETE:
            with open_session() as session:
                self._remove(session, key)

    def _create(self) -> EntityType:
        logger.info("Creating instance of %s", self._entity.__name__)
        return self._construct()

    def _save(self, session: Session, expected: EntityType) -> tuple:
        logger.info("Adding instance to session")
        session.add(expected)
        validate_pending(session)
        logger.info("Saving changes to database")
        try:
            session.commit()
        except DBAPIError as error:
            red(logger, "%s", error.orig)
            raise
        key = key_of(expected, self.key_names)
        logger.info("Entity saved with id %s", _format_key(key))
        return key

    def _reload(self, session: Session, key: tuple) -> EntityType:
        criteria = dict(zip(self.key_names, key))
        actual = session.execute(select(self._entity).filter_by(**criteria)).scalars().one_or_none()
        if actual is None:
            raise EntityNotFound(f"No {self._entity.__name__} with {criteria}")
        return actual

    def _remove(self, session: Session, key: tuple) -> None:
        actual = self._reload(session, key)
        logger.info("Removing instance from session")
        session.delete(actual)
        logger.info("Saving changes to database")
        session.commit()
