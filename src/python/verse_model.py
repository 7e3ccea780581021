"""
Verse Model - Verse Objects, Segments and Normalized Text

This module defines the Python dataclasses exchanged by the verse renderer and
the quote highlighter. Verse objects mirror the JSON produced by the
USFM-to-JSON alignment parser; segments mirror what the front end renders.

Design principles:
- Closed set of flat variants discriminated by `type` (no inheritance tree)
- JSON-serializable with camelCase keys for IPC with the front end
- Missing optional fields are None, never an error
"""

from dataclasses import dataclass, field
from typing import List, Optional, Dict, Any, Union, Tuple


# ============================================================================
# TYPE ALIASES
# ============================================================================

VerseObjectType = str  # 'text', 'word', 'milestone', 'quote', ...
OriginalOffset = int  # Code point index into the original text


# ============================================================================
# VERSE OBJECT TYPES
# ============================================================================

@dataclass
class TextObject:
    """Literal text. The parser fills either `text` or `nextChar`."""
    text: Optional[str] = None
    next_char: Optional[str] = None
    type: str = field(default='text', init=False)

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {'type': self.type}
        if self.text is not None:
            result['text'] = self.text
        if self.next_char is not None:
            result['nextChar'] = self.next_char
        return result


@dataclass
class WordObject:
    """A word token. Aligned words carry a Strong's number in `strong`."""
    text: Optional[str] = None
    content: Optional[str] = None
    strong: Optional[str] = None
    type: str = field(default='word', init=False)

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {'type': self.type}
        if self.text is not None:
            result['text'] = self.text
        if self.content is not None:
            result['content'] = self.content
        if self.strong is not None:
            result['strong'] = self.strong
        return result


@dataclass
class MilestoneObject:
    """Alignment milestone (`k` or `zaln`) grouping child verse objects."""
    tag: Optional[str] = None
    children: List['VerseObject'] = field(default_factory=list)
    type: str = field(default='milestone', init=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'type': self.type,
            'tag': self.tag,
            'children': [c.to_dict() for c in self.children],
        }


@dataclass
class QuoteObject:
    """Poetry/quote line marker carrying literal text (\\q, \\q1, ...)."""
    text: Optional[str] = None
    next_char: Optional[str] = None
    tag: Optional[str] = None
    type: str = field(default='quote', init=False)

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {'type': self.type}
        if self.tag is not None:
            result['tag'] = self.tag
        if self.text is not None:
            result['text'] = self.text
        if self.next_char is not None:
            result['nextChar'] = self.next_char
        return result


@dataclass
class SectionObject:
    """Section heading (\\s, \\s1, ...)."""
    content: Optional[str] = None
    tag: Optional[str] = None
    type: str = field(default='section', init=False)

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {'type': self.type}
        if self.tag is not None:
            result['tag'] = self.tag
        if self.content is not None:
            result['content'] = self.content
        return result


@dataclass
class ParagraphObject:
    """Paragraph break. Carries no text."""
    tag: Optional[str] = None
    type: str = field(default='paragraph', init=False)

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {'type': self.type}
        if self.tag is not None:
            result['tag'] = self.tag
        return result


@dataclass
class FootnoteObject:
    """Footnote (\\f ... \\f*)."""
    content: Optional[str] = None
    tag: Optional[str] = None
    type: str = field(default='footnote', init=False)

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {'type': self.type}
        if self.tag is not None:
            result['tag'] = self.tag
        if self.content is not None:
            result['content'] = self.content
        return result


@dataclass
class UnsupportedObject:
    """Any other parser node. Keeps its original `type` for round-tripping."""
    type: str = ''
    tag: Optional[str] = None
    content: Optional[str] = None
    text: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {'type': self.type}
        if self.tag is not None:
            result['tag'] = self.tag
        if self.content is not None:
            result['content'] = self.content
        if self.text is not None:
            result['text'] = self.text
        return result


# Type alias for any verse object
# Valid types: text, word, milestone, quote, section, paragraph, footnote
# Everything else is an UnsupportedObject
VerseObject = Union[
    TextObject,
    WordObject,
    MilestoneObject,
    QuoteObject,
    SectionObject,
    ParagraphObject,
    FootnoteObject,
    UnsupportedObject,
]


# ============================================================================
# SEGMENT TYPES
# ============================================================================

@dataclass
class TextSegment:
    """Plain passthrough text."""
    text: str
    type: str = field(default='text', init=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'type': self.type,
            'text': self.text,
        }


@dataclass
class HighlightSegment:
    """Highlighted quote text with the style class the front end applies."""
    text: str
    class_name: str
    type: str = field(default='highlight', init=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'type': self.type,
            'text': self.text,
            'className': self.class_name,
        }


Segment = Union[TextSegment, HighlightSegment]


def segments_to_text(segments: List[Segment]) -> str:
    """Join segment texts back into the string they were cut from."""
    return ''.join(s.text for s in segments)


# ============================================================================
# NORMALIZATION TYPES
# ============================================================================

@dataclass
class NormalizedText:
    """
    Matching form of a text plus the way back to the original.

    index_map[i] is the offset in the original text of the character that
    produced normalized[i]. Both sequences always have the same length.
    """
    normalized: str = ''
    index_map: List[OriginalOffset] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.normalized)

    def original_span(self, start_norm: int, end_norm: int) -> Tuple[int, int]:
        """
        Map a half-open normalized range onto a half-open original range.

        Raises IndexError if the range falls outside the index map.
        """
        if start_norm < 0 or end_norm <= start_norm or end_norm > len(self.index_map):
            raise IndexError(f"normalized range [{start_norm}, {end_norm}) outside index map")
        return self.index_map[start_norm], self.index_map[end_norm - 1] + 1

    def to_dict(self) -> Dict[str, Any]:
        return {
            'normalized': self.normalized,
            'indexMap': list(self.index_map),
        }


@dataclass
class QuoteMatch:
    """One occurrence of the normalized quote: [start_norm, end_norm)."""
    start_norm: int
    end_norm: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            'startNorm': self.start_norm,
            'endNorm': self.end_norm,
        }


# ============================================================================
# FACTORY FUNCTIONS
# ============================================================================

def verse_object_from_dict(data: Dict[str, Any]) -> VerseObject:
    """
    Build a verse object variant from a parser dict.

    Unknown types become UnsupportedObject. Milestone children are converted
    recursively; a missing `children` list becomes empty and a child that is
    not a dict becomes an empty UnsupportedObject.
    """
    if not isinstance(data, dict):
        raise TypeError(f"verse object must be a dict, got {type(data).__name__}")

    obj_type = data.get('type')

    if obj_type == 'text':
        return TextObject(text=data.get('text'), next_char=data.get('nextChar'))
    if obj_type == 'word':
        return WordObject(text=data.get('text'), content=data.get('content'),
                          strong=data.get('strong'))
    if obj_type == 'milestone':
        children = data.get('children')
        if not isinstance(children, list):
            children = []
        return MilestoneObject(
            tag=data.get('tag'),
            children=[verse_object_from_dict(c) if isinstance(c, dict) else UnsupportedObject()
                      for c in children],
        )
    if obj_type == 'quote':
        return QuoteObject(text=data.get('text'), next_char=data.get('nextChar'),
                           tag=data.get('tag'))
    if obj_type == 'section':
        return SectionObject(content=data.get('content'), tag=data.get('tag'))
    if obj_type == 'paragraph':
        return ParagraphObject(tag=data.get('tag'))
    if obj_type == 'footnote':
        return FootnoteObject(content=data.get('content'), tag=data.get('tag'))

    return UnsupportedObject(
        type=obj_type if isinstance(obj_type, str) else '',
        tag=data.get('tag'),
        content=data.get('content'),
        text=data.get('text'),
    )


def verse_objects_from_list(items: Optional[List[Any]]) -> List[VerseObject]:
    """Convert a parser list, passing already-built variants through."""
    if not items:
        return []
    return [item if not isinstance(item, dict) else verse_object_from_dict(item)
            for item in items]
