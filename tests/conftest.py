"""Pytest configuration and shared fixtures for graphmaker tests."""

import pytest

from graphmaker import GraphMaker, RecordCodec, create_graph, parse_records


@pytest.fixture
def example_input():
    """Root with two children that both point at one leaf."""
    return """
    0,Root,1;2
    1,Foo,3
    2,Bar,3
    3,Buzz,
    """


@pytest.fixture
def positioned_input():
    """Every record carries an explicit position."""
    return """
    0,Root,1;2,0;0
    1,Foo,3,-100;120
    2,Bar,3,100;120
    3,Buzz,,0;240
    """


@pytest.fixture
def cyclic_input():
    """Two nodes pointing at each other."""
    return """
    0,A,1
    1,B,0
    """


@pytest.fixture
def codec():
    """Default RecordCodec instance."""
    return RecordCodec()


@pytest.fixture
def maker():
    """Default GraphMaker instance."""
    return GraphMaker()


@pytest.fixture
def example_graph(example_input):
    """Graph model built from the example input."""
    return create_graph(parse_records(example_input))
