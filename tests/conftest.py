"""
Pytest configuration and shared fixtures for the openapi_ir test suite.
"""

import shutil
import tempfile
from pathlib import Path

import pytest

from openapi_ir.builder import build_document
from openapi_ir.loader import load_openapi_document


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture(scope="session")
def fixtures_dir(project_root):
    """Return the directory holding the OpenAPI fixture documents."""
    return project_root / "tests" / "fixtures"


@pytest.fixture
def load_fixture(fixtures_dir):
    """Return a loader for fixture documents by file name."""
    def load(name):
        return load_openapi_document(fixtures_dir / name)
    return load


@pytest.fixture
def petstore(load_fixture):
    """The OpenAPI 3.0 petstore document as a plain dict."""
    return load_fixture("petstore_30.yaml")


@pytest.fixture
def petstore_ir(petstore):
    return build_document(petstore)


@pytest.fixture
def graph_doc(load_fixture):
    """An OpenAPI 3.1 document with cycles, tuples and an x-ext bundle."""
    return load_fixture("graph_31.yaml")


@pytest.fixture
def graph_ir(graph_doc):
    return build_document(graph_doc)


@pytest.fixture
def temp_output_dir():
    """Create a temporary directory for written output."""
    temp_dir = tempfile.mkdtemp(prefix="openapi_ir_test_")
    yield Path(temp_dir)
    # Cleanup after test
    shutil.rmtree(temp_dir, ignore_errors=True)


def make_document(schemas=None, paths=None, openapi="3.0.3", **components):
    """Build a minimal OpenAPI document dict around the given pieces."""
    document = {
        "openapi": openapi,
        "info": {"title": "Test", "version": "1.0.0"},
        "paths": paths or {},
    }
    section = dict(components)
    if schemas is not None:
        section["schemas"] = schemas
    if section:
        document["components"] = section
    return document


@pytest.fixture
def make_doc():
    """Return the minimal document factory."""
    return make_document


@pytest.fixture
def node_document():
    """The self-referential Node schema."""
    return make_document(schemas={
        "Node": {
            "type": "object",
            "properties": {
                "value": {"type": "string"},
                "children": {
                    "type": "array",
                    "items": {"$ref": "#/components/schemas/Node"},
                },
            },
        },
    })
