"""
Structural complexity of a Schema.

The score measures shape, not size: an enum costs the same whatever the
number of values, and a reference costs 1 whatever it points to (the
target is scored on its own). Renderers compare the score with a
threshold to decide between inlining a schema and naming it.
"""

from .ir.schema import PRIMITIVE_TYPES, Schema

DEFAULT_COMPLEXITY_THRESHOLD = 4

REFERENCE_COST = 1
PRIMITIVE_COST = 1
ENUM_COST = 1
OBJECT_COST = 2
EMPTY_OBJECT_COST = 1
RECORD_COST = 1
ARRAY_COST = 1
COMPOSITION_COST = 1
ANY_COST = 1


def score(schema: Schema) -> int:
    """
    Complexity of `schema`:

        reference                 1
        primitive                 1
        primitive with enum       2
        enum without type         2
        object                    2 + sum of property scores
        object without properties 1 (+ additionalProperties score)
        array                     1 + item score(s)
        allOf / oneOf / anyOf     1 + sum of branch scores, per keyword
        not                       1 + negated score
        multi-type                1 + sum of per-type scores
        no type, no structure     1
    """
    if schema.is_reference:
        return REFERENCE_COST

    total = 0
    for _, branches in schema.compositions():
        total += COMPOSITION_COST + sum(score(branch) for branch in branches)
    if schema.not_ is not None:
        total += COMPOSITION_COST + score(schema.not_)

    types = schema.primitive_types
    if len(types) > 1:
        return total + COMPOSITION_COST + sum(_type_score(schema, kind) for kind in types)
    if len(types) == 1:
        return total + _type_score(schema, types[0])

    if schema.enum is not None:
        return total + PRIMITIVE_COST + ENUM_COST
    if schema.properties is not None or isinstance(schema.additional_properties, Schema):
        return total + _object_score(schema)
    if schema.items is not None:
        return total + _array_score(schema)
    return total or ANY_COST


def _type_score(schema: Schema, kind: str) -> int:
    if kind == "object":
        return _object_score(schema)
    if kind == "array":
        return _array_score(schema)
    if kind in PRIMITIVE_TYPES:
        return PRIMITIVE_COST + (ENUM_COST if schema.enum is not None else 0)
    return ANY_COST


def _object_score(schema: Schema) -> int:
    if schema.properties:
        return OBJECT_COST + sum(score(child) for child in schema.properties.values())
    if isinstance(schema.additional_properties, Schema):
        return RECORD_COST + score(schema.additional_properties)
    return EMPTY_OBJECT_COST


def _array_score(schema: Schema) -> int:
    if isinstance(schema.items, tuple):
        items_score = sum(score(item) for item in schema.items)
    elif schema.items is not None:
        items_score = score(schema.items)
    else:
        items_score = 0
    return ARRAY_COST + items_score
