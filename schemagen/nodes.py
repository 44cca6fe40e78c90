from types import MappingProxyType

DRAFT_07 = 'http://json-schema.org/draft-07/schema#'

LEAF_KINDS = ('null', 'boolean', 'integer', 'number', 'string')


class SchemaNode(object):
    __slots__ = ()

    def __repr__(self):
        return '%s(%s)' % (type(self).__name__, ', '.join(map(repr, self._key())))

    def __eq__(self, other):
        return type(self) is type(other) and self._key() == other._key()

    def __hash__(self):
        return hash((type(self).__name__,) + self._key())

    def _key(self):
        raise NotImplementedError


class TypeSchema(SchemaNode):
    __slots__ = ('kind',)

    def __init__(self, kind):
        if kind not in LEAF_KINDS:
            raise ValueError('unknown leaf kind: %r' % (kind,))
        self.kind = kind

    def _key(self):
        return (self.kind,)


class UnionSchema(SchemaNode):
    """Union of leaf kinds, `"type": [...]`

    The empty union accepts any value.
    """
    __slots__ = ('kinds',)

    def __init__(self, kinds=()):
        kinds = frozenset(kinds)
        unknown = kinds.difference(LEAF_KINDS)
        if unknown:
            raise ValueError('unknown leaf kinds: %s' % ', '.join(sorted(unknown)))
        self.kinds = kinds

    def _key(self):
        return (self.kinds,)


class ArraySchema(SchemaNode):
    __slots__ = ('items',)

    def __init__(self, items):
        self.items = items

    def _key(self):
        return (self.items,)


class ObjectSchema(SchemaNode):
    __slots__ = ('properties', 'required')

    def __init__(self, properties=None, required=()):
        properties = MappingProxyType(dict(properties or {}))
        required = frozenset(required)
        missing = required.difference(properties)
        if missing:
            raise ValueError('required keys without properties: %s' % ', '.join(sorted(missing)))
        self.properties = properties
        self.required = required

    def _key(self):
        # property order is presentation only
        return (frozenset(self.properties.items()), self.required)

    def __repr__(self):
        return 'ObjectSchema(%r, %r)' % (dict(self.properties), set(self.required))


class AnyOfSchema(SchemaNode):
    """Alternatives of incompatible shapes, `"anyOf": [...]`

    At most one alternative per category: leaf, array, object.
    """
    __slots__ = ('leaf', 'array', 'obj')

    def __init__(self, leaf=None, array=None, obj=None):
        self.leaf = leaf
        self.array = array
        self.obj = obj
        if len(self.alternatives) < 2:
            raise ValueError('anyOf needs at least two alternatives')

    @property
    def alternatives(self):
        return tuple(alt for alt in (self.leaf, self.array, self.obj) if alt is not None)

    def _key(self):
        return (self.leaf, self.array, self.obj)


ANY = UnionSchema()


def to_dict(node):
    """Schema Node -> plain JSON Schema dict

    Children are filled in through an explicit stack, so arbitrarily deep
    schemas never hit the recursion limit.
    """
    root = {}
    stack = [(node, root)]
    while stack:
        node, out = stack.pop()
        if isinstance(node, TypeSchema):
            out['type'] = node.kind
        elif isinstance(node, UnionSchema):
            if node.kinds:
                out['type'] = sorted(node.kinds)
        elif isinstance(node, ArraySchema):
            out['type'] = 'array'
            out['items'] = items = {}
            stack.append((node.items, items))
        elif isinstance(node, ObjectSchema):
            out['type'] = 'object'
            out['properties'] = properties = {}
            for name, child in node.properties.items():
                properties[name] = {}
                stack.append((child, properties[name]))
            out['required'] = sorted(node.required)
        elif isinstance(node, AnyOfSchema):
            out['anyOf'] = alternatives = []
            for alt in node.alternatives:
                alternatives.append({})
                stack.append((alt, alternatives[-1]))
        else:
            raise TypeError('not a schema node: %r' % (node,))
    return root
