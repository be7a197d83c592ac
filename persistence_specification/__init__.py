from persistence_specification.mapping import NotAMappedClass, NotAProperty, NotAReference
from persistence_specification.report import CheckOutcome, MappingVerificationFailed, VerificationReport
from persistence_specification.specification import (
    Cleanup,
    EntityNotFound,
    PersistenceSpecification,
    SpecificationAlreadyVerified,
)
from persistence_specification.utils.logging import configure_logging
from persistence_specification.validation import EntityValidationError

__all__ = [
    "CheckOutcome",
    "Cleanup",
    "EntityNotFound",
    "EntityValidationError",
    "MappingVerificationFailed",
    "NotAMappedClass",
    "NotAProperty",
    "NotAReference",
    "PersistenceSpecification",
    "SpecificationAlreadyVerified",
    "VerificationReport",
    "configure_logging",
]
