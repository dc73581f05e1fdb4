"""
Unit tests for document-level building: components, x-ext bundles, graph
metadata and the enum catalog.
"""

import logging

from openapi_ir.builder import build_document
from openapi_ir.config import IRSettings
from openapi_ir.ir import ComponentKind, SchemaComponent


class TestComponents:
    """Test component lowering."""

    def test_schema_names_in_declaration_order(self, petstore_ir):
        assert petstore_ir.schema_names == ("Pet", "NewPet", "PetStatus", "Category", "Error")

    def test_components_grouped_by_kind(self, petstore_ir):
        kinds = [component.kind for component in petstore_ir.components]
        assert kinds == sorted(kinds, key=list(ComponentKind).index)

    def test_parameter_component(self, petstore_ir):
        limit = next(c for c in petstore_ir.components_of(ComponentKind.PARAMETER) if c.name == "Limit")
        assert limit.parameter.name == "limit"
        assert limit.parameter.description == "How many items to return"

    def test_security_scheme_is_verbatim(self, petstore_ir):
        (scheme,) = petstore_ir.components_of(ComponentKind.SECURITY_SCHEME)
        assert scheme.scheme_type == "apiKey"
        assert scheme.scheme == {"type": "apiKey", "name": "api_key", "in": "header"}

    def test_bundled_schema(self, graph_ir):
        owner = graph_ir.schema_component("Owner")
        assert owner.bundle_key == "a1b2c3"
        assert owner.pointer.ref == "#/x-ext/a1b2c3/components/schemas/Owner"
        assert "Owner" in graph_ir.schema_names
        assert graph_ir.extensions is None

    def test_bundled_name_collision_stays_out_of_graph(self, make_doc, caplog, monkeypatch):
        # configure_logging() from an earlier CLI run turns propagation off
        monkeypatch.setattr(logging.getLogger("openapi_ir"), "propagate", True)
        document = make_doc(schemas={"Pet": {"type": "object"}})
        document["x-ext"] = {"k1": {"components": {"schemas": {"Pet": {"type": "string"}}}}}

        with caplog.at_level(logging.WARNING, logger="openapi_ir"):
            ir = build_document(document)

        pets = [c for c in ir.components if isinstance(c, SchemaComponent) and c.name == "Pet"]
        assert [c.bundle_key for c in pets] == [None, "k1"]
        assert ir.schema_names == ("Pet",)
        assert ir.schema("Pet").type == "object"
        assert "defined more than once" in caplog.text

    def test_document_fields(self, petstore_ir, graph_ir):
        assert petstore_ir.openapi_version == "3.0.3"
        assert petstore_ir.info["title"] == "Petstore"
        assert petstore_ir.servers == ({"url": "https://petstore.example.com/v1"},)
        assert petstore_ir.tags == ({"name": "pets"},)
        assert graph_ir.is_openapi_31
        assert graph_ir.json_schema_dialect == "https://spec.openapis.org/oas/3.1/dialect/base"

    def test_ir_version_from_settings(self, petstore):
        assert build_document(petstore).version == "1.0.0"
        assert build_document(petstore, IRSettings(ir_version="2.0.0")).version == "2.0.0"


class TestGraphMetadata:
    """Test that graph results are copied into schema metadata."""

    def test_dependency_info(self, petstore_ir):
        info = petstore_ir.schema("NewPet").metadata.dependency_info
        assert info.references == ("PetStatus", "Category")
        assert info.referenced_by == ("Pet",)
        assert info.depth == 1

    def test_self_reference(self, node_document):
        ir = build_document(node_document)
        assert ir.dependency_graph.circular_references == (("Node",),)
        assert ir.schema("Node").metadata.circular_references == ("Node",)

    def test_two_node_cycle(self, graph_ir):
        assert graph_ir.schema("Parent").metadata.circular_references == ("Parent", "Child")
        assert graph_ir.schema("Child").metadata.circular_references == ("Parent", "Child")
        assert graph_ir.schema("Owner").metadata.circular_references == ()


class TestEnumCatalog:
    """Test enum collection and naming."""

    def test_catalog_names(self, petstore_ir):
        assert list(petstore_ir.enums) == ["PetStatus", "status"]

    def test_component_enum(self, petstore_ir):
        status = petstore_ir.enums["PetStatus"]
        assert status.values == ("available", "pending", "sold")
        assert status.owner == "PetStatus"
        assert status.description == "Lifecycle state of a pet"

    def test_operation_enum_has_no_owner(self, petstore_ir):
        assert petstore_ir.enums["status"].owner is None

    def test_name_collisions_and_anonymous_enums(self, make_doc):
        document = make_doc(schemas={
            "Shirt": {
                "type": "object",
                "properties": {
                    "size": {"type": "string", "enum": ["S", "M"]},
                    "variants": {
                        "type": "array",
                        "items": {"type": "integer", "enum": [1, 2]},
                    },
                },
            },
            "Shoe": {
                "type": "object",
                "properties": {"size": {"type": "integer", "enum": [40, 41]}},
            },
        })
        enums = build_document(document).enums
        assert list(enums) == ["size", "Enum_2", "size_2"]
        assert enums["size_2"].values == (40, 41)
        assert enums["Enum_2"].owner == "Shirt"
