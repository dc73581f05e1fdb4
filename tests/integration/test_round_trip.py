"""
Integration tests for build -> write -> build.

Rebuilding a written document must give back the same IR, and writing it
again must give back the same OpenAPI document.
"""

import pytest
import yaml

from openapi_ir import build_document, write_document
from openapi_ir.errors import UnresolvedReference
from openapi_ir.ir import PresenceChain


def assert_round_trip(document):
    first = build_document(document)
    written = write_document(first)
    second = build_document(written)
    assert second == first
    assert write_document(second) == written
    return first, written


class TestFixtureRoundTrips:
    """Test round trips over the fixture documents."""

    @pytest.mark.parametrize("name", ["petstore_30.yaml", "graph_31.yaml"])
    def test_fixture(self, load_fixture, name):
        assert_round_trip(load_fixture(name))

    def test_round_trip_through_yaml_text(self, petstore_ir):
        text = yaml.safe_dump(write_document(petstore_ir), sort_keys=False)
        assert build_document(yaml.safe_load(text)) == petstore_ir

    def test_node_example(self, node_document):
        ir, written = assert_round_trip(node_document)
        assert ir.dependency_graph.circular_references == (("Node",),)
        children = written["components"]["schemas"]["Node"]["properties"]["children"]
        assert children == {"type": "array", "items": {"$ref": "#/components/schemas/Node"}}


class TestRoundTripFidelity:
    """Test that specific details survive a round trip."""

    def test_required_and_optional(self, make_doc):
        ir, written = assert_round_trip(make_doc(schemas={
            "User": {
                "type": "object",
                "required": ["id", "email"],
                "properties": {
                    "id": {"type": "integer"},
                    "email": {"type": "string", "nullable": True},
                    "nickname": {"type": "string"},
                    "bio": {"type": "string", "nullable": True},
                },
            },
        }))
        presence = {name: child.metadata.presence for name, child in ir.schema("User").properties.items()}
        assert presence == {
            "id": PresenceChain.REQUIRED,
            "email": PresenceChain.NULLABLE,
            "nickname": PresenceChain.OPTIONAL,
            "bio": PresenceChain.OPTIONAL_NULLABLE,
        }
        assert written["components"]["schemas"]["User"]["required"] == ["id", "email"]

    def test_openapi_31_nullability(self, make_doc):
        _, written = assert_round_trip(make_doc(openapi="3.1.0", schemas={
            "Maybe": {"type": ["integer", "string", "null"]},
            "Nothing": {"type": "null"},
        }))
        schemas = written["components"]["schemas"]
        assert schemas["Maybe"] == {"type": ["integer", "string", "null"]}
        assert schemas["Nothing"] == {"type": "null"}

    def test_nullable_converted_for_31(self, make_doc):
        # 3.0 style nullable in a 3.1 document is written as a type array
        _, written = assert_round_trip(make_doc(openapi="3.1.0", schemas={
            "Legacy": {"type": "string", "nullable": True},
        }))
        assert written["components"]["schemas"]["Legacy"] == {"type": ["string", "null"]}

    def test_optional_path_parameter(self, make_doc):
        _, written = assert_round_trip(make_doc(paths={
            "/a/{b}": {
                "get": {
                    "parameters": [{"name": "b", "in": "path", "required": False, "schema": {"type": "string"}}],
                    "responses": {"200": {"description": "ok"}},
                },
            },
        }))
        assert written["paths"]["/a/{b}"]["get"]["parameters"][0]["required"] is False

    def test_mixed_path_level_parameters(self, make_doc):
        document = make_doc(
            paths={
                "/items/{id}": {
                    "parameters": [
                        {"name": "trace", "in": "header", "schema": {"type": "string"}},
                        {"$ref": "#/components/parameters/Id"},
                    ],
                    "get": {"responses": {"200": {"description": "ok"}}},
                    "put": {
                        "parameters": [{"name": "dryRun", "in": "query", "schema": {"type": "boolean"}}],
                        "responses": {"204": {"description": "done"}},
                    },
                },
            },
            parameters={"Id": {"name": "id", "in": "path", "schema": {"type": "string"}}},
        )
        ir, written = assert_round_trip(document)
        assert [p.name for p in ir.operation("put", "/items/{id}").parameters] == ["id", "trace", "dryRun"]
        assert written["paths"]["/items/{id}"]["parameters"] == [{"$ref": "#/components/parameters/Id"}]

    def test_operation_redeclares_path_level_reference(self, make_doc):
        document = make_doc(
            paths={
                "/items/{id}": {
                    "parameters": [{"$ref": "#/components/parameters/Id"}],
                    "get": {
                        "parameters": [
                            {"name": "q", "in": "query", "schema": {"type": "string"}},
                            {"$ref": "#/components/parameters/Id"},
                        ],
                        "responses": {"200": {"description": "ok"}},
                    },
                    "delete": {"responses": {"204": {"description": "gone"}}},
                },
            },
            parameters={"Id": {"name": "id", "in": "path", "schema": {"type": "string"}}},
        )
        ir, written = assert_round_trip(document)
        assert [p.name for p in ir.operation("get", "/items/{id}").parameters] == ["q", "id"]
        item = written["paths"]["/items/{id}"]
        assert item["parameters"] == [{"$ref": "#/components/parameters/Id"}]
        assert item["get"]["parameters"][1] == {"$ref": "#/components/parameters/Id"}
        assert "parameters" not in item["delete"]

    def test_defaults_examples_and_const(self, make_doc):
        ir, _ = assert_round_trip(make_doc(openapi="3.1.0", schemas={
            "Settings": {
                "type": "object",
                "properties": {
                    "mode": {"const": None},
                    "retries": {"type": "integer", "default": 3, "example": 5},
                    "label": {"type": "string", "default": None},
                },
            },
        }))
        properties = ir.schema("Settings").properties
        assert properties["mode"].const is None
        assert properties["retries"].metadata.default == 3
        assert properties["label"].metadata.has_default

    def test_boolean_schemas(self, make_doc):
        assert_round_trip(make_doc(openapi="3.1.0", schemas={
            "Any": True,
            "Never": False,
            "Closed": {"type": "object", "additionalProperties": False},
        }))

    def test_compositions_and_discriminator(self, make_doc):
        assert_round_trip(make_doc(schemas={
            "Cat": {"type": "object", "properties": {"kind": {"type": "string"}}},
            "Dog": {"type": "object", "properties": {"kind": {"type": "string"}}},
            "Pet": {
                "oneOf": [{"$ref": "#/components/schemas/Cat"}, {"$ref": "#/components/schemas/Dog"}],
                "discriminator": {"propertyName": "kind"},
            },
            "NotCat": {"not": {"$ref": "#/components/schemas/Cat"}},
        }))

    def test_document_extras(self, make_doc):
        document = make_doc()
        document.update({
            "tags": [{"name": "a", "description": "first"}],
            "externalDocs": {"url": "https://example.com/docs"},
            "x-owner": "team",
        })
        _, written = assert_round_trip(document)
        assert written["x-owner"] == "team"
        assert written["externalDocs"] == {"url": "https://example.com/docs"}

    def test_bundled_parameter_is_inlined(self, make_doc):
        document = make_doc(paths={
            "/x": {"get": {
                "parameters": [{"$ref": "#/x-ext/h1/components/parameters/Page"}],
                "responses": {},
            }},
        })
        document["x-ext"] = {"h1": {"components": {"parameters": {
            "Page": {"name": "page", "in": "query", "schema": {"type": "integer"}},
        }}}}
        _, written = assert_round_trip(document)
        assert written["paths"]["/x"]["get"]["parameters"] == [
            {"name": "page", "in": "query", "schema": {"type": "integer"}},
        ]
        assert "x-ext" not in written


class TestInvalidDocuments:
    """Test that invalid documents abort the build."""

    def test_missing_schema(self, load_fixture):
        with pytest.raises(UnresolvedReference) as excinfo:
            build_document(load_fixture("invalid_ref.yaml"))
        assert "#/components/schemas/Missing" in str(excinfo.value)
        assert "paths" in excinfo.value.location
