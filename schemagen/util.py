import json
import logging
import sys
from pathlib import Path

import click
import jsonschema
import pyaml

# doubles represent every integer up to 2 ** 53 exactly
MAX_EXACT_INTEGER = 2 ** 53

SCHEMA_SUFFIX = '.jsonschema'


def json_kind(value):
    '''Leaf kind of a JSON value

    Arrays and objects give 'array' / 'object', everything else a leaf kind.
    '''
    if value is None:
        return 'null'
    # ! bool is a subclass of int
    if isinstance(value, bool):
        return 'boolean'
    if isinstance(value, int):
        return 'integer'
    if isinstance(value, float):
        if value.is_integer() and abs(value) <= MAX_EXACT_INTEGER:
            return 'integer'
        return 'number'
    if isinstance(value, str):
        return 'string'
    if isinstance(value, (list, tuple)):
        return 'array'
    if isinstance(value, dict):
        return 'object'
    raise TypeError('%r is not a JSON value' % (value,))


def read_json(path=None):
    """Parse the document in `path`, or standard input"""
    source = path or '<stdin>'
    logging.debug('reading %s', source)
    try:
        if path:
            with open(path, 'r', encoding='utf-8') as fp:
                text = fp.read()
        else:
            text = sys.stdin.read()
    except UnicodeDecodeError as e:
        raise click.ClickException('Cannot decode %s: %s' % (source, e))
    except OSError as e:
        raise click.ClickException('Cannot read %s: %s' % (source, e.strerror or e))

    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise click.ClickException(
            'Invalid JSON in %s: %s (line %d, column %d)' % (source, e.msg, e.lineno, e.colno)
        )
    except RecursionError:
        raise click.ClickException('Invalid JSON in %s: nesting too deep' % source)


def output_path(input_path):
    """data.json -> data.jsonschema, next to the input

    An input already ending in .jsonschema gets the suffix appended instead,
    so it is never overwritten.
    """
    path = Path(input_path)
    if path.suffix == SCHEMA_SUFFIX:
        return path.with_name(path.name + SCHEMA_SUFFIX)
    return path.with_suffix(SCHEMA_SUFFIX)


def render(schema, as_yaml=False, compact=False):
    try:
        if as_yaml:
            return pyaml.dump(schema)
        if compact:
            return json.dumps(schema, ensure_ascii=False, separators=(',', ':')) + '\n'
        return json.dumps(schema, ensure_ascii=False, indent=2) + '\n'
    except RecursionError:
        raise click.ClickException('Schema is nested too deep to render')


def write_text(path, text):
    try:
        with open(path, 'w', encoding='utf-8') as fp:
            fp.write(text)
    except OSError as e:
        raise click.ClickException('Cannot write %s: %s' % (path, e.strerror or e))
    logging.debug('schema written to %s', path)


def check(data, schema):
    """Validate the input document against its inferred schema
    """
    try:
        jsonschema.validate(data, schema, cls=jsonschema.Draft7Validator)
    except jsonschema.SchemaError as e:
        raise click.ClickException('Invalid schema: %s' % e.message)
    except jsonschema.ValidationError as e:
        path = ''.join('[%s]' % json.dumps(part, ensure_ascii=False) for part in e.absolute_path)
        raise click.ClickException('Input does not match schema at $%s: %s' % (path, e.message))
    except RecursionError:
        raise click.ClickException('Input is nested too deep to check')
