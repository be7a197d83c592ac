from sqlalchemy import Column, ForeignKey, Integer, String, create_engine
from sqlalchemy.orm import declarative_base, relationship, sessionmaker

from persistence_specification import PersistenceSpecification


Base = declarative_base()


class Address(Base):
    __tablename__ = "addresses"

    address_id = Column(Integer, primary_key=True)
    street = Column(String(100))


class Contact(Base):
    __tablename__ = "contacts"

    contact_id = Column(Integer, primary_key=True)
    name = Column(String(50), nullable=False)
    address_id = Column(Integer, ForeignKey("addresses.address_id"))
    address = relationship(Address)


engine = create_engine("sqlite://")
Base.metadata.create_all(engine)
SessionC = sessionmaker(engine)

report = (
    PersistenceSpecification(Contact, engine, SessionC)
    .with_key(Contact.contact_id)
    .check_property(Contact.name, "Kris McGinnes")
    .check_reference(Contact.address, Address(street="Main Street 1"))
    .verify_mappings()
)
assert report.succeeded, report.failures

# name is required, so this one fails validation before anything reaches the database
report = PersistenceSpecification(Contact, engine, SessionC).check_reference(Contact.address, None).verify_mappings()
assert not report.succeeded
