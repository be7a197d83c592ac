import logging
from typing import Generator

import pytest
from _pytest.config.argparsing import Parser
from _pytest.fixtures import SubRequest
from _pytest.logging import LogCaptureFixture
from sqlalchemy.engine import Engine, create_engine
from sqlalchemy.orm import sessionmaker

from persistence_specification.tests.company import Base


def pytest_addoption(parser: Parser) -> None:
    parser.addoption("--sqlalchemy-url", action="store", default="sqlite://")


@pytest.fixture()
def engine(request: SubRequest) -> Generator[Engine, None, None]:
    connection_url = request.config.getoption("--sqlalchemy-url")
    engine = create_engine(connection_url)
    Base.metadata.drop_all(engine)
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture()
def session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(engine)


@pytest.fixture()
def progress(caplog: LogCaptureFixture) -> LogCaptureFixture:
    caplog.set_level(logging.INFO, logger="persistence_specification")
    return caplog
