import typing

from sqlalchemy import inspect
from sqlalchemy.exc import NoInspectionAvailable
from sqlalchemy.orm import ColumnProperty, Mapper, RelationshipProperty
from sqlalchemy.orm.attributes import QueryableAttribute


class NotAMappedClass(TypeError):
    pass


class NotAProperty(TypeError):
    pass


class NotAReference(TypeError):
    pass


Attribute = typing.Union[str, QueryableAttribute]


def mapper_of(entity: typing.Type) -> Mapper:
    try:
        mapper = inspect(entity)
    except NoInspectionAvailable:
        raise NotAMappedClass(f"{entity!r} is not mapped")
    if not isinstance(mapper, Mapper):
        raise NotAMappedClass(f"{entity!r} is not mapped")
    return mapper


def resolve_attribute(entity: typing.Type, attribute: Attribute) -> str:
    if isinstance(attribute, str):
        return attribute
    if isinstance(attribute, QueryableAttribute):
        if not issubclass(entity, attribute.class_):
            raise NotAProperty(f"{attribute} does not belong to {entity.__name__}")
        return attribute.key
    raise NotAProperty(f"Expected {entity.__name__} attribute or its name, got {attribute!r}")


def column_attribute(entity: typing.Type, attribute: Attribute) -> str:
    name = resolve_attribute(entity, attribute)
    prop = mapper_of(entity).attrs.get(name)
    if not isinstance(prop, ColumnProperty):
        raise NotAProperty(f"{entity.__name__}.{name} is not a mapped column")
    return name


def relationship_attribute(entity: typing.Type, attribute: Attribute, collection: bool) -> str:
    name = resolve_attribute(entity, attribute)
    prop = mapper_of(entity).attrs.get(name)
    if not isinstance(prop, RelationshipProperty):
        raise NotAReference(f"{entity.__name__}.{name} is not a relationship")
    if bool(prop.uselist) != collection:
        kind = "collection" if prop.uselist else "scalar"
        raise NotAReference(f"{entity.__name__}.{name} is a {kind} relationship")
    return name


def key_attributes(entity: typing.Type) -> typing.Tuple[str, ...]:
    mapper = mapper_of(entity)
    return tuple(mapper.get_property_by_column(column).key for column in mapper.primary_key)


def key_of(instance: typing.Any, names: typing.Optional[typing.Sequence[str]] = None) -> typing.Optional[tuple]:
    if instance is None:
        return None
    if names is None:
        names = key_attributes(type(instance))
    return tuple(getattr(instance, name) for name in names)
