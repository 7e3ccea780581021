"""
Verse Renderer - flattens parser verse objects into display text

The USFM-to-JSON alignment parser delivers each verse as a list of verse
objects: plain text, words, alignment milestones wrapping words, sections,
paragraph breaks and footnotes. This module folds that tree into a single
string, leaf first.

IMPORTANT CONSTRAINTS:
- Top-level objects are concatenated with no separator; whitespace is already
  encoded as explicit text/paragraph objects
- `k` milestones join their children with a single space
- `zaln` milestones join aligned words with NO separator, and a `zaln` whose
  only child is another milestone renders exactly like that child
- Unknown types never fail: they render empty, or as a bracket literal when
  unsupported markup is requested
"""

from typing import Any, Callable, Dict, List, Optional, Sequence

from verse_model import (
    VerseObject,
    WordObject,
    MilestoneObject,
    SectionObject,
    FootnoteObject,
    verse_objects_from_list,
)


# ============================================================================
# FIELD ACCESS
# ============================================================================

def _get_text(obj: Any) -> str:
    """Literal payload of a text/quote object: `text`, else `nextChar`."""
    return getattr(obj, 'text', None) or getattr(obj, 'next_char', None) or ''


def _get_word(obj: Any) -> str:
    """Surface form of a word: `text`, else `content`."""
    return getattr(obj, 'text', None) or getattr(obj, 'content', None) or ''


def _get_aligned_words(objs: Sequence[Any]) -> str:
    """Aligned word group: word forms glued together with no separator."""
    return ''.join(_get_word(o) for o in objs)


# ============================================================================
# PER-TYPE RENDERERS
# ============================================================================

def _render_text(obj: Any, show_unsupported: bool) -> str:
    return _get_text(obj)


def _render_word(obj: WordObject, show_unsupported: bool) -> str:
    if obj.strong:
        return _get_aligned_words([obj])
    return _get_word(obj)


def _render_milestone(obj: MilestoneObject, show_unsupported: bool) -> str:
    children = verse_objects_from_list(obj.children)

    if obj.tag == 'k':
        return ' '.join(_render_object(c, show_unsupported) for c in children)

    if obj.tag == 'zaln':
        # Nested zaln chains collapse without adding separators
        if len(children) == 1 and getattr(children[0], 'type', None) == 'milestone':
            return _render_object(children[0], show_unsupported)
        return _get_aligned_words(children)

    return ''


def _render_section(obj: SectionObject, show_unsupported: bool) -> str:
    return obj.content or ''


def _render_paragraph(obj: Any, show_unsupported: bool) -> str:
    return '\n'


def _render_footnote(obj: FootnoteObject, show_unsupported: bool) -> str:
    return '/fn ' + (obj.content or '') + ' fn/'


def _render_unsupported(obj: Any, show_unsupported: bool) -> str:
    if not show_unsupported:
        return ''
    tag = getattr(obj, 'tag', None) or getattr(obj, 'type', None)
    if not tag or not isinstance(tag, str):
        return ''
    body = getattr(obj, 'content', None) or getattr(obj, 'text', None) or ''
    return '/' + tag + ' ' + body + ' ' + tag + '/'


_RENDERERS: Dict[str, Callable[[Any, bool], str]] = {
    'text': _render_text,
    'quote': _render_text,
    'word': _render_word,
    'milestone': _render_milestone,
    'section': _render_section,
    'paragraph': _render_paragraph,
    'footnote': _render_footnote,
}


def _render_object(obj: VerseObject, show_unsupported: bool) -> str:
    """Reduce one verse object to its string form."""
    renderer = _RENDERERS.get(getattr(obj, 'type', None), _render_unsupported)
    return renderer(obj, show_unsupported)


# ============================================================================
# PUBLIC API
# ============================================================================

def render_verse_text(
    verse_objects: Optional[Sequence[Any]],
    show_unsupported: bool = False
) -> str:
    """
    Render a verse's objects into display text.

    Args:
        verse_objects: Parser dicts and/or verse model objects, in order
        show_unsupported: Render unknown markup as `/tag content tag/`
            instead of dropping it

    Returns:
        The flattened verse text ("" for an empty or missing list)
    """
    objs = verse_objects_from_list(list(verse_objects) if verse_objects else None)
    return ''.join(_render_object(o, show_unsupported) for o in objs)


def render_chapter_text(
    chapter: Optional[Dict[str, Any]],
    show_unsupported: bool = False
) -> Dict[str, str]:
    """
    Render every verse of a parsed chapter.

    Args:
        chapter: Mapping of verse id -> {"verseObjects": [...]}, as emitted
            by the parser for one chapter (key order is preserved)
        show_unsupported: Passed through to render_verse_text

    Returns:
        Mapping of verse id -> rendered text
    """
    rendered: Dict[str, str] = {}
    if not chapter:
        return rendered

    for verse_id, verse in chapter.items():
        objects: Optional[List[Any]] = None
        if isinstance(verse, dict):
            objects = verse.get('verseObjects')
        rendered[verse_id] = render_verse_text(objects, show_unsupported)

    return rendered
