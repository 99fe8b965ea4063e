"""Pytest configuration and shared fixtures for SCAD parser tests."""

import pytest
from scad_parser import SCADParser, SCADSyntaxError


@pytest.fixture
def parser():
    """Create a parser instance for testing."""
    return SCADParser()


def parse_success(parser, code):
    """Helper function to parse code and assert success."""
    result = parser.parse_ast(code=code)
    assert result is not None
    return result


def parse_failure(parser, code, error=SCADSyntaxError):
    """Helper function to parse code and assert failure."""
    with pytest.raises(error) as excinfo:
        parser.parse_ast(code=code)
    return excinfo.value
