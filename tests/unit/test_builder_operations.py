"""
Unit tests for operation, parameter, request body and response lowering.
"""

import copy

import pytest

from openapi_ir.builder import build_document
from openapi_ir.errors import InvalidParameter, NestedReferenceNotAllowed
from openapi_ir.ir import ComponentKind, PresenceChain


class TestOperations:
    """Test operation collection over the petstore document."""

    def test_one_operation_per_path_and_method(self, petstore_ir):
        keys = [operation.key for operation in petstore_ir.operations]
        assert keys == ["GET /pets", "POST /pets", "GET /pets/{petId}", "DELETE /pets/{petId}"]

    def test_lookup_helpers(self, petstore_ir):
        assert petstore_ir.operation("GET", "/pets").operation_id == "listPets"
        assert petstore_ir.operation_by_id("deletePet").method == "delete"
        assert petstore_ir.operation("patch", "/pets") is None

    def test_path_item_fields(self, petstore_ir):
        operation = petstore_ir.operation_by_id("listPets")
        assert operation.path_item_summary == "Pet collection"
        assert operation.tags == ("pets",)

    def test_security(self, petstore_ir):
        assert [r.schemes for r in petstore_ir.security] == [{"api_key": ()}]
        assert petstore_ir.operation_by_id("deletePet").security == ()
        assert petstore_ir.operation_by_id("listPets").security is None

    def test_input_is_not_mutated(self, petstore):
        before = copy.deepcopy(petstore)
        build_document(petstore)
        assert petstore == before


class TestParameters:
    """Test parameter lowering and path-level merging."""

    def test_path_level_parameters_merged(self, petstore_ir):
        operation = petstore_ir.operation_by_id("showPetById")
        assert [p.name for p in operation.parameters] == ["petId", "X-Request-Id"]
        assert operation.path_item_parameter_refs == ("#/components/parameters/PetId",)
        assert [p.inherited for p in operation.parameters] == [True, False]

    def test_path_parameter_is_required(self, petstore_ir):
        pet_id = petstore_ir.operation_by_id("showPetById").parameters[0]
        assert pet_id.location == "path"
        assert pet_id.required is True
        assert pet_id.metadata.presence is PresenceChain.REQUIRED
        assert pet_id.ref == "#/components/parameters/PetId"

    def test_query_parameter_is_optional(self, petstore_ir):
        limit = petstore_ir.operation_by_id("listPets").parameters[0]
        assert limit.name == "limit"
        assert limit.required is False
        assert limit.schema.maximum == 100
        assert limit.metadata.presence is PresenceChain.OPTIONAL

    def test_grouped_by_location(self, petstore_ir):
        operation = petstore_ir.operation_by_id("showPetById")
        assert [p.name for p in operation.parameters_in("path")] == ["petId"]
        assert [p.name for p in operation.parameters_in("header")] == ["X-Request-Id"]
        assert operation.parameters_in("query") == ()

    def test_operation_overrides_path_level(self, make_doc):
        shared = {"name": "id", "in": "query", "schema": {"type": "string"}}
        override = {"name": "id", "in": "query", "required": True, "schema": {"type": "integer"}}
        document = make_doc(paths={
            "/things": {
                "parameters": [shared, {"name": "page", "in": "query", "schema": {"type": "integer"}}],
                "get": {"parameters": [override], "responses": {}},
            },
        })
        operation = build_document(document).operations[0]
        assert [p.name for p in operation.parameters] == ["page", "id"]
        assert operation.parameters[1].schema.type == "integer"

    def test_content_parameter(self, graph_ir):
        operation = graph_ir.operation_by_id("getNode")
        filter_param = operation.parameters[1]
        assert filter_param.content_type == "application/json"
        assert filter_param.schema.ref == "#/components/schemas/Filter"

    def test_parameter_without_schema_or_content(self, make_doc):
        document = make_doc(paths={
            "/things": {"get": {"parameters": [{"name": "q", "in": "query"}], "responses": {}}},
        })
        with pytest.raises(InvalidParameter) as excinfo:
            build_document(document)
        assert "q" in str(excinfo.value)


class TestBodiesAndResponses:
    """Test request bodies, responses and headers."""

    def test_referenced_request_body(self, petstore_ir):
        body = petstore_ir.operation_by_id("createPet").request_body
        assert body.required is True
        assert body.ref == "#/components/requestBodies/PetBody"
        media = body.content["application/json"]
        assert media.schema.ref == "#/components/schemas/NewPet"
        assert media.schema.metadata.required is True

    def test_response_order_and_status_codes(self, petstore_ir):
        operation = petstore_ir.operation_by_id("showPetById")
        assert [r.status_code for r in operation.responses] == ["200", "404"]
        assert operation.main_response.schema.ref == "#/components/schemas/Pet"

    def test_referenced_response(self, petstore_ir):
        default = petstore_ir.operation_by_id("listPets").response("default")
        assert default.ref == "#/components/responses/Error"
        assert default.description == "Unexpected error"

    def test_response_headers(self, petstore_ir):
        ok = petstore_ir.operation_by_id("listPets").response("200")
        assert list(ok.headers) == ["x-next"]
        assert ok.headers["x-next"].schema.type == "string"

    def test_nested_response_reference(self, make_doc):
        document = make_doc(
            paths={"/x": {"get": {"responses": {"200": {"$ref": "#/components/responses/Forward"}}}}},
            responses={
                "Ok": {"description": "ok"},
                "Forward": {"$ref": "#/components/responses/Ok"},
            },
        )
        with pytest.raises(NestedReferenceNotAllowed):
            build_document(document)

    def test_response_component(self, petstore_ir):
        (error,) = petstore_ir.components_of(ComponentKind.RESPONSE)
        assert error.name == "Error"
        assert error.response.status_code == ""
