#!/usr/bin/env python3
"""
Tests for verse object rendering.

Covers:
- Every verse object type in the rendering table
- k milestones (space join) and zaln milestones (no-separator join)
- Single-child zaln collapse
- Unsupported markup, hidden and shown
- Missing fields and empty input
- Dataclass input and chapter rendering
"""

import sys
import os
import unittest

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from verse_renderer import render_verse_text, render_chapter_text
from verse_model import (
    TextObject,
    WordObject,
    MilestoneObject,
    ParagraphObject,
    FootnoteObject,
)


def word(text, strong=None):
    obj = {'type': 'word', 'text': text}
    if strong:
        obj['strong'] = strong
    return obj


def zaln(*children):
    return {'type': 'milestone', 'tag': 'zaln', 'children': list(children)}


class TestLeafObjects(unittest.TestCase):
    """Text, word, section, paragraph and footnote objects."""

    def test_paragraph_then_text(self):
        """A paragraph renders as a newline before the following text."""
        verse = [{'type': 'paragraph'}, {'type': 'text', 'text': 'Hello'}]
        self.assertEqual(render_verse_text(verse), '\nHello')

    def test_text_uses_next_char_when_text_missing(self):
        self.assertEqual(render_verse_text([{'type': 'text', 'nextChar': ','}]), ',')

    def test_quote_renders_like_text(self):
        verse = [{'type': 'quote', 'tag': 'q1', 'text': 'Blessed is the man'}]
        self.assertEqual(render_verse_text(verse), 'Blessed is the man')

    def test_plain_word_uses_text_then_content(self):
        self.assertEqual(render_verse_text([word('God')]), 'God')
        self.assertEqual(render_verse_text([{'type': 'word', 'content': 'λόγος'}]), 'λόγος')

    def test_aligned_word_renders_its_text(self):
        self.assertEqual(render_verse_text([word('ἐν', strong='G17220')]), 'ἐν')

    def test_section_renders_content(self):
        verse = [{'type': 'section', 'tag': 's1', 'content': 'The Creation'}]
        self.assertEqual(render_verse_text(verse), 'The Creation')

    def test_footnote_is_wrapped_in_markers(self):
        verse = [
            {'type': 'text', 'text': 'In the beginning'},
            {'type': 'footnote', 'tag': 'f', 'content': '+ 1:1 or, when'},
        ]
        self.assertEqual(render_verse_text(verse), 'In the beginning/fn + 1:1 or, when fn/')

    def test_top_level_has_no_inserted_separators(self):
        verse = [word('In'), {'type': 'text', 'text': ' '}, word('the'), word('beginning')]
        self.assertEqual(render_verse_text(verse), 'In thebeginning')


class TestMilestones(unittest.TestCase):
    """Alignment milestones."""

    def test_aligned_word_join(self):
        """zaln with several word children glues them together."""
        verse = [zaln({'type': 'word', 'text': 'un'}, {'type': 'word', 'text': 'happy'})]
        self.assertEqual(render_verse_text(verse), 'unhappy')

    def test_single_milestone_child_collapses(self):
        """A zaln wrapping only another milestone renders like that milestone."""
        inner = zaln(word('Paul', strong='G39720'))
        outer = zaln(inner)
        self.assertEqual(render_verse_text([outer]), render_verse_text([inner]))
        self.assertEqual(render_verse_text([outer]), 'Paul')

    def test_deeply_nested_collapse(self):
        verse = [zaln(zaln(zaln(word('a'), word('b'))))]
        self.assertEqual(render_verse_text(verse), 'ab')

    def test_single_word_child_is_not_collapsed_as_milestone(self):
        self.assertEqual(render_verse_text([zaln(word('servant'))]), 'servant')

    def test_k_milestone_joins_children_with_space(self):
        verse = [{
            'type': 'milestone',
            'tag': 'k',
            'children': [zaln(word('Son')), zaln(word('of')), zaln(word('Man'))],
        }]
        self.assertEqual(render_verse_text(verse), 'Son of Man')

    def test_unknown_milestone_tag_renders_empty(self):
        verse = [{'type': 'milestone', 'tag': 'ts', 'children': [word('x')]}]
        self.assertEqual(render_verse_text(verse), '')
        self.assertEqual(render_verse_text(verse, show_unsupported=True), '')

    def test_missing_children_renders_empty(self):
        self.assertEqual(render_verse_text([{'type': 'milestone', 'tag': 'zaln'}]), '')
        self.assertEqual(render_verse_text([{'type': 'milestone', 'tag': 'k'}]), '')

    def test_realistic_aligned_verse(self):
        """Milestones, words and punctuation text objects form a readable verse."""
        verse = [
            zaln(word('Paul', strong='G39720')),
            {'type': 'text', 'text': ', '},
            zaln(word('a', strong='G14010'), word('servant', strong='G14010')),
            {'type': 'text', 'text': ' '},
            zaln(zaln(word('of'), word('Christ'))),
            {'type': 'text', 'text': '.'},
        ]
        self.assertEqual(render_verse_text(verse), 'Paul, aservant ofChrist.')


class TestUnsupported(unittest.TestCase):
    """Object types the renderer does not know."""

    def test_hidden_by_default(self):
        verse = [{'type': 'text', 'text': 'a'}, {'type': 'table', 'tag': 'tr', 'content': 'x'}]
        self.assertEqual(render_verse_text(verse), 'a')

    def test_bracket_literal_when_requested(self):
        verse = [{'type': 'table', 'tag': 'tr', 'content': 'cell'}]
        self.assertEqual(render_verse_text(verse, show_unsupported=True), '/tr cell tr/')

    def test_bracket_literal_falls_back_to_text(self):
        verse = [{'type': 'figure', 'tag': 'fig', 'text': 'caption'}]
        self.assertEqual(render_verse_text(verse, show_unsupported=True), '/fig caption fig/')

    def test_missing_type_is_unsupported(self):
        self.assertEqual(render_verse_text([{'text': 'orphan'}]), '')

    def test_untyped_items_render_empty_even_when_shown(self):
        """Items with neither tag nor type never produce an empty bracket literal."""
        self.assertEqual(render_verse_text([None, 'x'], show_unsupported=True), '')
        self.assertEqual(render_verse_text([{'content': 'x'}], show_unsupported=True), '')


class TestMalformedMilestones(unittest.TestCase):
    """Malformed milestone children from a broken parser payload."""

    def test_non_dict_child_does_not_raise(self):
        self.assertEqual(render_verse_text([zaln(None)]), '')
        self.assertEqual(render_verse_text([zaln(None)], show_unsupported=True), '')

    def test_non_dict_child_among_words(self):
        self.assertEqual(render_verse_text([zaln(word('a'), None, word('b'))]), 'ab')
        verse = [{'type': 'milestone', 'tag': 'k', 'children': [zaln(word('Son')), 'junk']}]
        self.assertEqual(render_verse_text(verse), 'Son ')

    def test_non_list_children_render_empty(self):
        verse = [{'type': 'milestone', 'tag': 'zaln', 'children': 'abc'}]
        self.assertEqual(render_verse_text(verse), '')

    def test_model_milestone_with_non_model_child(self):
        verse = [MilestoneObject(tag='zaln', children=[None])]
        self.assertEqual(render_verse_text(verse), '')


class TestInputs(unittest.TestCase):
    """Empty input, missing fields and model objects."""

    def test_empty_and_missing_sequences(self):
        self.assertEqual(render_verse_text([]), '')
        self.assertEqual(render_verse_text(None), '')

    def test_missing_optional_fields_render_empty(self):
        verse = [
            {'type': 'text'},
            {'type': 'word'},
            {'type': 'section'},
        ]
        self.assertEqual(render_verse_text(verse), '')

    def test_footnote_without_content(self):
        self.assertEqual(render_verse_text([{'type': 'footnote'}]), '/fn  fn/')

    def test_model_objects_render_like_dicts(self):
        verse = [
            ParagraphObject(),
            MilestoneObject(tag='zaln', children=[WordObject(text='un'), WordObject(text='happy')]),
            TextObject(text=' '),
            FootnoteObject(content='note'),
        ]
        self.assertEqual(render_verse_text(verse), '\nunhappy /fn note fn/')

    def test_rendering_is_repeatable(self):
        verse = [zaln(word('a'), word('b')), {'type': 'paragraph'}]
        self.assertEqual(render_verse_text(verse), render_verse_text(verse))


class TestChapterRendering(unittest.TestCase):
    """render_chapter_text over a parsed chapter."""

    def test_renders_each_verse_in_order(self):
        chapter = {
            'front': {'verseObjects': [{'type': 'section', 'content': 'Greeting'}]},
            '1': {'verseObjects': [word('Paul'), {'type': 'text', 'text': ','}]},
            '2': {'verseObjects': [zaln(word('to'), word('the'))]},
        }
        result = render_chapter_text(chapter)
        self.assertEqual(list(result.keys()), ['front', '1', '2'])
        self.assertEqual(result['front'], 'Greeting')
        self.assertEqual(result['1'], 'Paul,')
        self.assertEqual(result['2'], 'tothe')

    def test_verse_without_objects_is_empty(self):
        self.assertEqual(render_chapter_text({'3': {}}), {'3': ''})

    def test_empty_chapter(self):
        self.assertEqual(render_chapter_text(None), {})
        self.assertEqual(render_chapter_text({}), {})


if __name__ == '__main__':
    unittest.main()
