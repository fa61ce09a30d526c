"""
Tests for the markdown-it-py tokenizer adapter
"""

from django.test import SimpleTestCase

from mdpdf.events import (
    BlockKind,
    CodeBlock,
    CodeSpan,
    EndBlock,
    FootnoteReference,
    HtmlFragment,
    ImageStart,
    LinkStart,
    StartBlock,
    TableRow,
    TaskMarker,
    Text,
    ThematicBreak,
)
from mdpdf.tokenizer import tokenize
from mdpdf.transformer import transform


class TokenizeTestCase(SimpleTestCase):
    """Test cases for tokenize()"""

    def test_is_lazy_iterator(self):
        """Test that tokenize returns an iterator, not a list"""
        events = tokenize('# Title\n')
        self.assertIs(iter(events), events)

    def test_heading_and_fenced_code(self):
        """Test heading and fence events"""
        events = list(tokenize('# Title\n\n```python\nprint(1)\n```\n'))
        self.assertEqual(events, [
            StartBlock(BlockKind.HEADING, level=1),
            Text('Title'),
            EndBlock(BlockKind.HEADING, level=1),
            CodeBlock('python', 'print(1)\n'),
        ])

    def test_fence_info_keeps_first_word(self):
        """Test that extra fence info after the language is dropped"""
        events = list(tokenize('```rust ignore\nfn main() {}\n```\n'))
        self.assertEqual(events, [CodeBlock('rust', 'fn main() {}\n')])

    def test_indented_code_has_no_language(self):
        """Test that indented code blocks carry no language"""
        events = list(tokenize('    x = 1\n'))
        self.assertEqual(events, [CodeBlock(None, 'x = 1\n')])

    def test_unterminated_fence_runs_to_end(self):
        """Test that an unterminated fence swallows the rest of the document"""
        events = list(tokenize('```python\nprint(1)\n\n# not a heading\n'))
        self.assertEqual(len(events), 1)
        self.assertIsInstance(events[0], CodeBlock)
        self.assertIn('# not a heading', events[0].content)

    def test_inline_markup(self):
        """Test emphasis, strong, strikethrough and code spans"""
        events = list(tokenize('*a* **b** ~~c~~ `d`\n'))
        self.assertEqual(events, [
            StartBlock(BlockKind.PARAGRAPH),
            StartBlock(BlockKind.EMPHASIS), Text('a'), EndBlock(BlockKind.EMPHASIS),
            Text(' '),
            StartBlock(BlockKind.STRONG), Text('b'), EndBlock(BlockKind.STRONG),
            Text(' '),
            StartBlock(BlockKind.STRIKETHROUGH), Text('c'), EndBlock(BlockKind.STRIKETHROUGH),
            Text(' '),
            CodeSpan('d'),
            EndBlock(BlockKind.PARAGRAPH),
        ])

    def test_unmatched_emphasis_stays_text(self):
        """Test that a dangling delimiter is plain text"""
        events = list(tokenize('*not closed\n'))
        self.assertEqual(events, [
            StartBlock(BlockKind.PARAGRAPH),
            Text('*not closed'),
            EndBlock(BlockKind.PARAGRAPH),
        ])

    def test_link_and_image(self):
        """Test link and image events"""
        events = list(tokenize('[x](http://a.com "T") ![alt text](img.png)\n'))
        self.assertIn(LinkStart('http://a.com', 'T'), events)
        self.assertIn(EndBlock(BlockKind.LINK), events)
        self.assertIn(ImageStart('img.png', 'alt text', ''), events)

    def test_task_list(self):
        """Test that task markers are lifted out of list items"""
        events = list(tokenize('- [x] done\n- [ ] todo\n'))
        self.assertEqual(events, [
            StartBlock(BlockKind.BULLET_LIST),
            StartBlock(BlockKind.LIST_ITEM), TaskMarker(True), Text('done'), EndBlock(BlockKind.LIST_ITEM),
            StartBlock(BlockKind.LIST_ITEM), TaskMarker(False), Text('todo'), EndBlock(BlockKind.LIST_ITEM),
            EndBlock(BlockKind.BULLET_LIST),
        ])

    def test_brackets_outside_list_are_text(self):
        """Test that [x] in a paragraph is not a task marker"""
        events = list(tokenize('[x] not a task\n'))
        self.assertNotIn(TaskMarker(True), events)

    def test_ordered_list_start(self):
        """Test that the ordered list start number is kept"""
        events = list(tokenize('3. a\n4. b\n'))
        self.assertEqual(events[0], StartBlock(BlockKind.ORDERED_LIST, start=3))
        self.assertEqual(events[-1], EndBlock(BlockKind.ORDERED_LIST))

    def test_table_rows(self):
        """Test that tables become rows of inline cells"""
        events = list(tokenize('| a | *b* |\n|:--|--:|\n| 1 | 2 |\n'))
        self.assertEqual(events[0], StartBlock(BlockKind.TABLE))
        self.assertEqual(events[-1], EndBlock(BlockKind.TABLE))
        rows = [event for event in events if isinstance(event, TableRow)]
        self.assertEqual(len(rows), 2)
        self.assertEqual(rows[0].alignments, ('left', 'right'))
        self.assertEqual(rows[0].cells[0], (Text('a'),))
        self.assertEqual(
            rows[0].cells[1],
            (StartBlock(BlockKind.EMPHASIS), Text('b'), EndBlock(BlockKind.EMPHASIS)),
        )
        self.assertEqual(rows[1].cells, ((Text('1'),), (Text('2'),)))

    def test_thematic_break_and_blockquote(self):
        """Test rules and block quotes"""
        events = list(tokenize('> quoted\n\n---\n'))
        self.assertEqual(events[0], StartBlock(BlockKind.BLOCKQUOTE))
        self.assertIn(EndBlock(BlockKind.BLOCKQUOTE), events)
        self.assertEqual(events[-1], ThematicBreak())

    def test_footnotes(self):
        """Test footnote references and definitions"""
        events = list(tokenize('Text[^1]\n\n[^1]: Note\n'))
        self.assertIn(FootnoteReference('1'), events)
        self.assertIn(StartBlock(BlockKind.FOOTNOTES), events)
        self.assertIn(StartBlock(BlockKind.FOOTNOTE_DEFINITION, label='1'), events)

    def test_raw_html_is_text_by_default(self):
        """Test that raw HTML is not parsed unless enabled"""
        events = list(tokenize('<b>x</b>\n'))
        self.assertFalse(any(isinstance(event, HtmlFragment) for event in events))
        text = ''.join(event.text for event in events if isinstance(event, Text))
        self.assertEqual(text, '<b>x</b>')

    def test_raw_html_when_enabled(self):
        """Test that raw HTML blocks become HtmlFragments when enabled"""
        events = list(tokenize('<div>hi</div>\n', allow_raw_html=True))
        self.assertEqual(events, [HtmlFragment('<div>hi</div>\n')])

    def test_inline_html_is_marked_inline(self):
        """Test that tags inside a paragraph are inline fragments"""
        events = list(tokenize('a <b>bold</b> c\n', allow_raw_html=True))
        self.assertEqual(events, [
            StartBlock(BlockKind.PARAGRAPH),
            Text('a '),
            HtmlFragment('<b>', inline=True),
            Text('bold'),
            HtmlFragment('</b>', inline=True),
            Text(' c'),
            EndBlock(BlockKind.PARAGRAPH),
        ])

    def test_inline_html_renders_as_element(self):
        """Test inline raw HTML end to end"""
        html = transform(tokenize('a <b>bold</b> c', allow_raw_html=True), allow_raw_html=True)
        self.assertEqual(html, '<p>a <b>bold</b> c</p>\n')

    def test_inline_html_is_sanitized(self):
        """Test that unsafe inline markup is stripped, not escaped"""
        html = transform(
            tokenize('x <span onclick="e()">y</span> <script>z</script>\n', allow_raw_html=True),
            allow_raw_html=True,
        )
        self.assertIn('<span>y</span>', html)
        self.assertNotIn('onclick', html)
        self.assertNotIn('<script', html)

    def test_stream_is_well_nested(self):
        """Test that a rich document transforms without structural errors"""
        source = (
            '# Doc\n\n'
            '> quote with **bold [link](http://x)**\n\n'
            '1. one\n   - nested [ ] item\n2. two\n\n'
            '- [x] task\n\n'
            '| h1 | h2 |\n|----|----|\n| `c` | ~~s~~ |\n\n'
            'Footnote[^n].\n\n[^n]: The note.\n'
        )
        html = transform(tokenize(source))
        self.assertIn('<h1>Doc</h1>', html)
        self.assertIn('<table>', html)
