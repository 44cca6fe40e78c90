import logging
import sys

import click
import schemagen
from schemagen import util
from schemagen.merge import merge_all
from schemagen.nodes import DRAFT_07
from schemagen.nodes import ArraySchema
from schemagen.nodes import ObjectSchema
from schemagen.nodes import TypeSchema
from schemagen.nodes import to_dict

_VISIT = 0
_BUILD_ARRAY = 1
_BUILD_OBJECT = 2


def build_schema(data):
    """JSON value -> Schema Node

    Post-order walk over an explicit stack: a container is pushed back as a
    build step below its children, and collects their schemas from `results`
    once they are done.
    """
    results = []
    stack = [(_VISIT, data)]
    while stack:
        step, value = stack.pop()

        if step == _VISIT:
            kind = util.json_kind(value)
            if kind == 'object':
                stack.append((_BUILD_OBJECT, value))
                children = list(value.values())
            elif kind == 'array':
                stack.append((_BUILD_ARRAY, value))
                children = list(value)
            else:
                results.append(TypeSchema(kind))
                continue
            stack.extend((_VISIT, child) for child in reversed(children))
            continue

        count = len(value)
        schemas = results[len(results) - count:]
        del results[len(results) - count:]

        if step == _BUILD_OBJECT:
            properties = dict(zip(value.keys(), schemas))
            # every key of a single instance is required
            results.append(ObjectSchema(properties, properties))
        else:
            results.append(ArraySchema(merge_all(schemas)))

    return results.pop()


def generate(data, title=None):
    schema = {'$schema': DRAFT_07}
    if title is not None:
        schema['title'] = title
    schema.update(to_dict(build_schema(data)))
    return schema


@click.command()
@click.option('--output', '-o', type=click.Path(dir_okay=False), help='Output schema file.')
@click.option('--stdout', '-s', is_flag=True, help='Write the schema to standard output.')
@click.option('--title', '-t', default=None, help='Schema title.')
@click.option('--yaml', 'as_yaml', is_flag=True, help='Write YAML instead of JSON.')
@click.option('--compact', '-c', is_flag=True, help='Write JSON without indentation.')
@click.option('--check', is_flag=True, help='Validate the input against the inferred schema.')
@click.option('--debug', '-d', is_flag=True, help='Print debug messages.')
@click.option('--version', '-v', is_flag=True, is_eager=True, help='Print version and exit.')
@click.argument('input_file', required=False, type=click.Path(exists=True, dir_okay=False))
def run(input_file, output, stdout, title, as_yaml, compact, check, debug, version):
    """Infer a draft-07 JSON Schema from the JSON document in INPUT_FILE (or stdin)."""
    if version:
        click.echo('schemagen %s' % schemagen.__version__)
        return

    log_format = '%(asctime)s - %(levelname)s - %(message)s'
    log_level = logging.DEBUG if debug else logging.WARNING
    logging.basicConfig(level=log_level, format=log_format, stream=sys.stderr)

    data = util.read_json(input_file)
    schema = generate(data, title)
    logging.debug('inferred schema for %s', input_file or '<stdin>')

    if check:
        util.check(data, schema)
        logging.debug('input matches the inferred schema')

    text = util.render(schema, as_yaml, compact)

    if stdout:
        destination = None
    elif output:
        destination = output
    elif input_file:
        destination = util.output_path(input_file)
    else:
        destination = None

    if destination is None:
        click.echo(text, nl=False)
    else:
        util.write_text(destination, text)


if __name__ == "__main__":
    run()
