import io
import json
import os
import unittest
from unittest import mock

import click
import yaml
from click.testing import CliRunner

import schemagen
from schemagen import util
from schemagen.infer import generate
from schemagen.infer import run

DOCUMENT = {'name': 'café', 'values': [1, 2.5, 'x'], 'items': [{'a': 1}, {'b': None}]}


class CliTestCase(unittest.TestCase):
    def setUp(self):
        self.runner = CliRunner()

    def write_input(self, filename='data.json', text=None):
        with open(filename, 'w', encoding='utf-8') as fp:
            fp.write(json.dumps(DOCUMENT) if text is None else text)
        return filename


class TestOutputDestination(CliTestCase):
    def test_stdin_to_stdout(self):
        result = self.runner.invoke(run, [], input=json.dumps(DOCUMENT))
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(json.loads(result.output), generate(DOCUMENT))

    def test_input_file_defaults_to_jsonschema_file(self):
        with self.runner.isolated_filesystem():
            os.mkdir('in')
            path = self.write_input(os.path.join('in', 'data.json'))
            result = self.runner.invoke(run, [path])
            self.assertEqual(result.exit_code, 0, result.output)
            self.assertEqual(result.output, '')

            with open(os.path.join('in', 'data.jsonschema'), encoding='utf-8') as fp:
                self.assertEqual(json.load(fp), generate(DOCUMENT))

    def test_output_option(self):
        with self.runner.isolated_filesystem():
            path = self.write_input()
            result = self.runner.invoke(run, [path, '-o', 'out.json'])
            self.assertEqual(result.exit_code, 0, result.output)
            self.assertFalse(os.path.exists('data.jsonschema'))

            with open('out.json', encoding='utf-8') as fp:
                text = fp.read()
            self.assertTrue(text.endswith('}\n'))
            self.assertEqual(json.loads(text), generate(DOCUMENT))

    def test_stdout_flag_wins(self):
        with self.runner.isolated_filesystem():
            path = self.write_input()
            result = self.runner.invoke(run, [path, '-s', '-o', 'out.json'])
            self.assertEqual(result.exit_code, 0, result.output)
            self.assertFalse(os.path.exists('out.json'))
            self.assertFalse(os.path.exists('data.jsonschema'))
            self.assertEqual(json.loads(result.output), generate(DOCUMENT))

    def test_output_path(self):
        self.assertEqual(str(util.output_path('data.json')), 'data.jsonschema')
        self.assertEqual(str(util.output_path('data')), 'data.jsonschema')
        self.assertEqual(
            util.output_path(os.path.join('a', 'b.c.json')),
            util.output_path(os.path.join('a', 'b.c.txt')),
        )

    def test_input_named_like_output_is_kept(self):
        self.assertEqual(str(util.output_path('x.jsonschema')), 'x.jsonschema.jsonschema')
        with self.runner.isolated_filesystem():
            path = self.write_input('x.jsonschema')
            result = self.runner.invoke(run, [path])
            self.assertEqual(result.exit_code, 0, result.output)

            with open(path, encoding='utf-8') as fp:
                self.assertEqual(json.load(fp), DOCUMENT)
            with open('x.jsonschema.jsonschema', encoding='utf-8') as fp:
                self.assertEqual(json.load(fp), generate(DOCUMENT))

    def test_read_json_from_stdin(self):
        with mock.patch('sys.stdin', io.StringIO('[1, "x"]')):
            self.assertEqual(util.read_json(), [1, 'x'])


class TestFormatting(CliTestCase):
    def test_pretty_json_keeps_non_ascii(self):
        result = self.runner.invoke(run, ['-s'], input='{"名字": "x"}')
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn('"名字"', result.output)
        self.assertIn('\n  "type": "object"', result.output)

    def test_compact(self):
        result = self.runner.invoke(run, ['--compact'], input='[1]')
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(
            result.output,
            '{"$schema":"http://json-schema.org/draft-07/schema#",'
            '"type":"array","items":{"type":"integer"}}\n',
        )

    def test_yaml(self):
        result = self.runner.invoke(run, ['--yaml'], input=json.dumps(DOCUMENT))
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(yaml.safe_load(result.output), generate(DOCUMENT))

    def test_title(self):
        result = self.runner.invoke(run, ['-t', 'Document'], input='{}')
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(json.loads(result.output)['title'], 'Document')

    def test_version(self):
        result = self.runner.invoke(run, ['--version'])
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(result.output.strip(), 'schemagen %s' % schemagen.__version__)

    def test_render_too_deep(self):
        schema = {}
        for _ in range(100000):
            schema = {'items': schema}
        with self.assertRaises(click.ClickException) as cm:
            util.render(schema)
        self.assertIn('nested too deep', cm.exception.message)


class TestErrors(CliTestCase):
    def test_invalid_json(self):
        result = self.runner.invoke(run, [], input='{"a": ')
        self.assertEqual(result.exit_code, 1)
        self.assertIn('Invalid JSON in <stdin>', result.output)

    def test_invalid_json_file(self):
        with self.runner.isolated_filesystem():
            path = self.write_input(text='[1, 2,]')
            result = self.runner.invoke(run, [path])
            self.assertEqual(result.exit_code, 1)
            self.assertIn('Invalid JSON in data.json', result.output)
            self.assertIn('line 1', result.output)
            self.assertFalse(os.path.exists('data.jsonschema'))

    def test_too_deeply_nested_json(self):
        result = self.runner.invoke(run, ['-s'], input='[' * 100000 + ']' * 100000)
        self.assertEqual(result.exit_code, 1)
        self.assertIn('Invalid JSON in <stdin>: nesting too deep', result.output)

    def test_missing_input_file(self):
        with self.runner.isolated_filesystem():
            result = self.runner.invoke(run, ['missing.json'])
            self.assertEqual(result.exit_code, 2)

    def test_unwritable_output(self):
        with self.runner.isolated_filesystem():
            path = self.write_input()
            target = os.path.join('no-such-dir', 'out.json')
            result = self.runner.invoke(run, [path, '-o', target])
            self.assertEqual(result.exit_code, 1)
            self.assertIn('Cannot write', result.output)


class TestCheck(CliTestCase):
    def test_check_passes(self):
        result = self.runner.invoke(run, ['--check'], input=json.dumps(DOCUMENT))
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(json.loads(result.output), generate(DOCUMENT))

    def test_check_reports_mismatch(self):
        schema = generate({'a': [1, 2]})
        with self.assertRaises(click.ClickException) as cm:
            util.check({'a': [1, 'x']}, schema)
        self.assertIn('$["a"][1]', cm.exception.message)

    def test_check_reports_invalid_schema(self):
        with self.assertRaises(click.ClickException) as cm:
            util.check({}, {'type': 'dict'})
        self.assertIn('Invalid schema', cm.exception.message)


if __name__ == '__main__':
    unittest.main()
