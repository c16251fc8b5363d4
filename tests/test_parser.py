import unittest
from io import StringIO
from pathlib import Path

from pyprops import (
    MalformedEscape, Properties, PropertiesParser, dump, dumps, load, loads
)

RESOURCES = Path(__file__).parent / 'resources'


def read_sample() -> str:
    return (RESOURCES / 'test.properties').read_text(encoding='utf-8')


class TestLoad(unittest.TestCase):
    def setUp(self) -> None:
        self.text = read_sample()
        self.props = loads(self.text)

    def test_cooked_and_raw_views(self) -> None:
        p = self.props
        self.assertEqual(len(p), 7)
        self.assertEqual(list(p.keys()), [
            'one', 'two', 'three', ' with spaces',
            'altsep', 'multiline', 'key.4'])
        self.assertEqual(p.raw_keys(), [
            'one', 'two', 'three', '\\ with\\ spaces',
            'altsep', 'multiline', 'key.4'])
        self.assertEqual(list(p.values()), [
            'simple',
            'value containing spaces',
            'and escapes\n\t\r\f',
            'everywhere  ',
            'value',
            'one two  three',
            'ሴ'])
        self.assertEqual(p.raw_values(), [
            'simple',
            'value containing spaces',
            'and escapes\\n\\t\\r\\f',
            'everywhere  ',
            'value',
            'one \\\n    two  \\\n\tthree',
            '\\u1234'])

    def test_header_and_comments(self) -> None:
        p = self.props
        self.assertEqual(p.header, ['#comment1', '#  comment2'])
        self.assertEqual(p.get_comment('one'), ['! comment3'])
        self.assertEqual(p.get_comment('two'), [])
        self.assertEqual(
            p.get_comment('three'),
            ['# another comment', '! and a comment', '! block'])

    def test_store_unmodified_is_identical(self) -> None:
        self.assertEqual(dumps(self.props), self.text)

    def test_store_into_stream(self) -> None:
        buf = StringIO()
        dump(self.props, buf)
        self.assertEqual(buf.getvalue(), self.text)
        self.assertEqual(dumps(load(StringIO(self.text))), self.text)

    def test_store_with_header(self) -> None:
        rest = self.text.split('\n', 2)[2]
        self.assertEqual(
            dumps(self.props, 'A header line'), '# A header line\n' + rest)
        # one-off, the stored header stays.
        self.assertEqual(self.props.header, ['#comment1', '#  comment2'])
        self.assertEqual(dumps(self.props), self.text)


class TestLineParsing(unittest.TestCase):
    def test_escape_scenario(self) -> None:
        text = 'three=and escapes\\n\\t\\r\\f\n'
        p = loads(text)
        self.assertEqual(p['three'], 'and escapes\n\t\r\f')
        self.assertEqual(dumps(p), text)

    def test_header_only_then_put(self) -> None:
        p = loads('# A header comment')
        self.assertEqual(len(p), 0)
        self.assertEqual(p.header, ['# A header comment'])
        p['first'] = 'dummy'
        self.assertEqual(dumps(p), '# A header comment\nfirst=dummy\n')

    def test_comment_touching_key_is_not_header(self) -> None:
        p = loads('# about k\nk=v\n')
        self.assertEqual(p.header, [])
        self.assertEqual(p.get_comment('k'), ['# about k'])

    def test_detached_comment_kept_in_place(self) -> None:
        text = 'a=1\n\n# loose\n\n# about b\nb=2\n'
        p = loads(text)
        self.assertEqual(p.header, [])
        self.assertEqual(p.get_comment('b'), ['# about b'])
        self.assertEqual(dumps(p), text)

    def test_leading_blank_line_means_no_header(self) -> None:
        text = '\n# not a header\n\na=1\n'
        p = loads(text)
        self.assertEqual(p.header, [])
        self.assertEqual(dumps(p), text)

    def test_trailing_content_dropped(self) -> None:
        p = loads('a=1\n\n# owned by nothing\n')
        self.assertEqual(dumps(p), 'a=1\n')

    def test_separators(self) -> None:
        text = 'a=1\nb:2\nc 3\nd\t=\t4\ne\nf = \ng  :  x:y=z\n'
        p = loads(text)
        self.assertEqual(p.to_dict(), {
            'a': '1', 'b': '2', 'c': '3', 'd': '4',
            'e': '', 'f': '', 'g': 'x:y=z'})
        self.assertEqual(dumps(p), text)

    def test_escaped_separator_in_key(self) -> None:
        p = loads('a\\=b\\ c=d\n')
        self.assertEqual(p['a=b c'], 'd')
        self.assertEqual(p.raw_keys(), ['a\\=b\\ c'])

    def test_indented_lines(self) -> None:
        text = '   # indented comment\n\tkey = value\n'
        p = loads(text)
        self.assertEqual(p['key'], 'value')
        self.assertEqual(p.get_comment('key'), ['   # indented comment'])
        self.assertEqual(dumps(p), text)

    def test_line_terminators(self) -> None:
        p = loads('a=1\r\nb = x \\\r\n  y\rc=3')
        self.assertEqual(p.to_dict(), {'a': '1', 'b': 'x y', 'c': '3'})
        self.assertEqual(dumps(p), 'a=1\nb = x \\\n  y\nc=3')
        self.assertEqual(
            dumps(p, newline='\r\n'), 'a=1\r\nb = x \\\r\n  y\r\nc=3')

    def test_missing_final_line_break_kept(self) -> None:
        text = 'a=1\nb=2'
        self.assertEqual(dumps(loads(text)), text)
        # once something goes after it, the line is closed.
        p = loads(text)
        p['c'] = '3'
        self.assertEqual(dumps(p), 'a=1\nb=2\nc=3\n')
        p = loads(text)
        del p['b']
        self.assertEqual(dumps(p), 'a=1\n')
        p = loads(text)
        p['b'] = 'two'
        self.assertEqual(dumps(p), 'a=1\nb=two')

    def test_key_continued_on_next_line(self) -> None:
        text = 'ke\\\n  y=v\n'
        p = loads(text)
        self.assertEqual(p.to_dict(), {'key': 'v'})
        self.assertEqual(p.raw_keys(), ['ke\\\n  y'])
        self.assertEqual(dumps(p), text)

    def test_continuation_into_blank_line(self) -> None:
        text = 'a=x \\\n\nb=2\n'
        p = loads(text)
        self.assertEqual(p.to_dict(), {'a': 'x ', 'b': '2'})
        self.assertEqual(dumps(p), text)

    def test_continuation_swallows_comment_marks(self) -> None:
        p = loads('a=x\\\n  # still a\n')
        self.assertEqual(p['a'], 'x# still a')

    def test_even_backslashes_do_not_continue(self) -> None:
        p = loads('a=x\\\\\nb=2\n')
        self.assertEqual(p.to_dict(), {'a': 'x\\', 'b': '2'})

    def test_empty_input(self) -> None:
        p = loads('')
        self.assertEqual(len(p), 0)
        self.assertEqual(p.header, [])
        self.assertEqual(dumps(p), '')

    def test_duplicate_key_replaced_in_place(self) -> None:
        with self.assertWarns(UserWarning):
            p = loads('a=1\nb=2\n# new a\na=3\n')
        self.assertEqual(list(p), ['a', 'b'])
        self.assertEqual(p['a'], '3')
        self.assertEqual(p.get_comment('a'), ['# new a'])
        self.assertEqual(dumps(p), '# new a\na=3\nb=2\n')

    def test_malformed_escape_rejects_stream(self) -> None:
        with self.assertRaises(MalformedEscape) as cm:
            loads('a=1\n\nb=\\u12\nc=3\n')
        self.assertEqual(cm.exception.lineno, 3)
        self.assertIn('line 3', str(cm.exception))

    def test_dangling_backslash_at_end(self) -> None:
        with self.assertRaises(MalformedEscape):
            loads('a=1\nb=2\\')

    def test_backslash_before_final_line_break(self) -> None:
        for text in ('a=b\\\n', 'a=b\\\r\n'):
            with self.subTest(text=text):
                p = loads(text)
                self.assertEqual(p.to_dict(), {'a': 'b'})
                self.assertEqual(p.get_raw('a'), 'b\\\n')
        self.assertEqual(dumps(loads('a=b\\\n')), 'a=b\\\n')

    def test_load_into_existing(self) -> None:
        p = Properties()
        p['z'] = '0'
        PropertiesParser.readstream(StringIO('# not a header\n\na=1\n'), p)
        self.assertEqual(list(p), ['z', 'a'])
        self.assertEqual(p.header, [])


if __name__ == '__main__':
    unittest.main()
