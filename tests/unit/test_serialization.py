"""
Unit tests for the JSON form of the IR and for IR validation.
"""

import json
from dataclasses import replace

from openapi_ir.ir import NOT_SET, Metadata, PresenceChain, Schema, SchemaComponent, SchemaProperties
from openapi_ir.ir.serialization import document_from_dict, document_to_dict, load_schema, to_json_value
from openapi_ir.ir.validation import validate_document


class TestSerialization:
    """Test Document <-> JSON-compatible tree."""

    def test_json_round_trip(self, petstore_ir):
        data = json.loads(json.dumps(document_to_dict(petstore_ir)))
        assert document_from_dict(data) == petstore_ir

    def test_json_round_trip_with_cycles(self, graph_ir):
        data = json.loads(json.dumps(document_to_dict(graph_ir)))
        restored = document_from_dict(data)
        assert restored == graph_ir
        assert restored.dependency_graph.circular_references == (("Node",), ("Parent", "Child"))

    def test_properties_are_pairs(self):
        schema = Schema(type="object", properties=SchemaProperties([("b", Schema()), ("a", Schema())]))
        dumped = to_json_value(schema)
        assert [pair[0] for pair in dumped["properties"]] == ["b", "a"]

    def test_null_and_absent_are_distinct(self):
        with_null = Schema(metadata=Metadata.for_position(False, default=None), example=None)
        dumped = to_json_value(with_null)
        assert dumped["example"] is None
        assert dumped["metadata"]["default"] is None
        assert "const" not in dumped

        restored = load_schema(dumped)
        assert restored.example is None
        assert restored.const is NOT_SET
        assert restored.metadata.default is None

    def test_presence_is_a_string(self):
        dumped = to_json_value(Metadata.for_position(True, nullable=True))
        assert dumped["presence"] == "nullable"

    def test_components_carry_their_kind(self, petstore_ir):
        data = document_to_dict(petstore_ir)
        assert data["components"][0]["kind"] == "schemas"

    def test_grouping_is_rebuilt(self, petstore_ir):
        data = json.loads(json.dumps(document_to_dict(petstore_ir)))
        assert "parameters_by_location" not in data["operations"][0]
        operation = document_from_dict(data).operation_by_id("showPetById")
        assert [p.name for p in operation.parameters_in("header")] == ["X-Request-Id"]


class TestValidation:
    """Test the IR invariant checks."""

    def test_built_documents_are_valid(self, petstore_ir, graph_ir):
        assert validate_document(petstore_ir) == []
        assert validate_document(graph_ir) == []

    def test_reference_with_structure(self, petstore_ir):
        broken = Schema(ref="#/components/schemas/Pet", type="object")
        document = _with_schema(petstore_ir, "Category", Schema(
            type="object", properties=SchemaProperties([("pet", broken)]),
        ))
        messages = [issue.message for issue in validate_document(document)]
        assert any("carries structural fields" in message for message in messages)

    def test_required_disagreement(self, petstore_ir):
        document = _with_schema(petstore_ir, "Category", Schema(
            type="object",
            required=("id",),
            properties=SchemaProperties([("id", Schema(type="integer"))]),
        ))
        issues = validate_document(document)
        assert [issue.location for issue in issues] == ["components/schemas/Category/properties/id"]

    def test_presence_mismatch(self, petstore_ir):
        bad = Schema(metadata=Metadata(required=True, presence=PresenceChain.OPTIONAL))
        document = _with_schema(petstore_ir, "Category", bad)
        assert len(validate_document(document)) == 1

    def test_unknown_reference(self, petstore_ir):
        document = _with_schema(petstore_ir, "Category", Schema(ref="#/components/schemas/Ghost"))
        issues = validate_document(document)
        assert "unknown schema 'Ghost'" in str(issues[0])


def _with_schema(document, name, schema):
    components = tuple(
        replace(component, schema=schema)
        if isinstance(component, SchemaComponent) and component.name == name else component
        for component in document.components
    )
    return replace(document, components=components)
