from functools import reduce

from schemagen.nodes import ANY
from schemagen.nodes import AnyOfSchema
from schemagen.nodes import ArraySchema
from schemagen.nodes import ObjectSchema
from schemagen.nodes import TypeSchema
from schemagen.nodes import UnionSchema


def is_leaf(node):
    return isinstance(node, TypeSchema) or (isinstance(node, UnionSchema) and bool(node.kinds))


def leaf_kinds(node):
    if isinstance(node, TypeSchema):
        return {node.kind}
    return set(node.kinds)


def leaf_schema(kinds):
    """Leaf kinds -> TypeSchema / UnionSchema

    integer is absorbed by number.
    """
    kinds = set(kinds)
    if 'number' in kinds:
        kinds.discard('integer')
    if len(kinds) == 1:
        return TypeSchema(kinds.pop())
    return UnionSchema(kinds)


_MERGE = 0
_BUILD_ARRAY = 1
_BUILD_OBJECT = 2
_BUILD_ANY_OF = 3


def _category(node):
    if isinstance(node, ArraySchema):
        return 'array'
    if isinstance(node, ObjectSchema):
        return 'obj'
    return 'leaf'


def _slots(a, b):
    """category -> alternatives of both operands falling in it"""
    slots = {}
    for node in (a, b):
        alternatives = node.alternatives if isinstance(node, AnyOfSchema) else (node,)
        for alt in alternatives:
            slots.setdefault(_category(alt), []).append(alt)
    return slots


def _pop(results, count):
    popped = results[len(results) - count:]
    del results[len(results) - count:]
    return popped


def merge(a, b):
    """Generalize two schemas observed at the same position

    The result accepts everything either operand accepts. Nested pairs are
    merged through an explicit stack, composites are assembled once their
    children are done.
    """
    results = []
    stack = [(_MERGE, a, b)]
    while stack:
        step, a, b = stack.pop()

        if step == _MERGE:
            if a == ANY:
                results.append(b)
            elif b == ANY:
                results.append(a)
            elif is_leaf(a) and is_leaf(b):
                results.append(leaf_schema(leaf_kinds(a) | leaf_kinds(b)))
            elif isinstance(a, ArraySchema) and isinstance(b, ArraySchema):
                stack.append((_BUILD_ARRAY, a, b))
                stack.append((_MERGE, a.items, b.items))
            elif isinstance(a, ObjectSchema) and isinstance(b, ObjectSchema):
                shared = [name for name in a.properties if name in b.properties]
                stack.append((_BUILD_OBJECT, a, b))
                stack.extend(
                    (_MERGE, a.properties[name], b.properties[name])
                    for name in reversed(shared)
                )
            else:
                slots = _slots(a, b)
                paired = [alts for alts in slots.values() if len(alts) == 2]
                stack.append((_BUILD_ANY_OF, slots, None))
                stack.extend((_MERGE, alts[0], alts[1]) for alts in reversed(paired))

        elif step == _BUILD_ARRAY:
            results.append(ArraySchema(results.pop()))

        elif step == _BUILD_OBJECT:
            shared = [name for name in a.properties if name in b.properties]
            merged = dict(zip(shared, _pop(results, len(shared))))
            properties = dict(a.properties)
            properties.update(merged)
            for name, schema in b.properties.items():
                properties.setdefault(name, schema)
            # required only if present on every instance
            results.append(ObjectSchema(properties, a.required & b.required))

        else:
            slots = a
            paired = [category for category, alts in slots.items() if len(alts) == 2]
            merged = dict(zip(paired, _pop(results, len(paired))))
            alternatives = {
                category: merged.get(category, alts[0])
                for category, alts in slots.items()
            }
            if len(alternatives) == 1:
                results.append(alternatives.popitem()[1])
            else:
                results.append(AnyOfSchema(**alternatives))

    return results.pop()


def merge_all(schemas):
    schemas = list(schemas)
    if not schemas:
        return ANY
    return reduce(merge, schemas)
