#!/usr/bin/env python3
"""
Quote Highlighter for OBS and Verse Text

This module locates a quote from a translation note inside narrative text and
splits that text into plain and highlighted segments:
1. Normalize the text and the quote (markdown markup, smart quotes,
   diacritics, case and whitespace) while keeping a map back to the original
2. Find every non-overlapping occurrence of the normalized quote
3. Pick the requested occurrence (1-based)
4. Map the match back to the original text and cut it into segments

The raw text is NEVER modified: segments always concatenate to exactly the
input. Matching is exact substring search on the normalized form, not fuzzy.
"""

import os
import sys
import unicodedata
from dataclasses import dataclass
from typing import List, Optional, Dict, Any

from verse_model import (
    NormalizedText,
    QuoteMatch,
    Segment,
    TextSegment,
    HighlightSegment,
)

# ============================================================================
# CONFIGURATION
# ============================================================================

DEFAULT_HIGHLIGHT_CLASS = "obs-highlight"

# Set VERSE_ENGINE_DEBUG=1 to trace every highlight call on stderr
DEBUG = os.environ.get('VERSE_ENGINE_DEBUG', '').lower() in ('1', 'true', 'yes', 'on')

# Markdown control characters dropped before matching
MARKDOWN_CONTROL_CHARS = frozenset('*_`~#>{}+=|')

# Raw brackets are dropped as well (link text keeps its words)
BRACKET_CHARS = frozenset('[]<>')

# "Smart" quotes and primes folded to their ASCII forms
SMART_QUOTE_MAP = {
    '‘': "'",  # left single quotation mark
    '’': "'",  # right single quotation mark
    '‚': "'",  # single low-9 quotation mark
    '“': '"',  # left double quotation mark
    '”': '"',  # right double quotation mark
    '„': '"',  # double low-9 quotation mark
    '′': "'",  # prime
    '″': '"',  # double prime
}

# Combining Diacritical Marks block
COMBINING_MARKS_START = 0x0300
COMBINING_MARKS_END = 0x036F


@dataclass
class HighlightOptions:
    """Per-call options for highlight_quote."""
    occurrence: int = 1
    highlight_class: str = DEFAULT_HIGHLIGHT_CLASS
    debug: bool = False


# ============================================================================
# DEBUG LOGGING
# ============================================================================

def _debug_log(message: str, debug: bool = False, prefix: str = "[HIGHLIGHT]"):
    """Print debug message if debug mode is enabled."""
    if debug:
        print(f"{prefix} {message}", file=sys.stderr, flush=True)


# ============================================================================
# NORMALIZATION
# ============================================================================

def _fold_character(char: str) -> str:
    """
    Decompose, strip combining diacritics and lowercase a single character.

    May return more than one character (e.g. ligatures that lowercase to
    two letters) or none (a bare combining mark).
    """
    decomposed = unicodedata.normalize('NFD', char)
    stripped = ''.join(
        c for c in decomposed
        if not COMBINING_MARKS_START <= ord(c) <= COMBINING_MARKS_END
    )
    return stripped.lower()


def _is_letter_or_number(text: str) -> bool:
    """True if any character is in a Unicode Letter or Number category."""
    return any(unicodedata.category(c)[0] in ('L', 'N') for c in text)


def normalize_markdown_text(text: Optional[str]) -> NormalizedText:
    """
    Reduce markdown-ish text to its matching form.

    Rules, applied left to right:
    - A markdown link destination "(...)" directly after "]" is skipped whole
    - "!" directly before "[" (image marker) is dropped
    - Markdown control characters and raw brackets are dropped
    - Smart quotes become ASCII quotes
    - Whitespace runs collapse to one space; no leading or trailing space
    - Everything else is decomposed, stripped of combining diacritics and
      lowercased; anything that is then not a letter or number counts as
      whitespace

    Args:
        text: Raw text (None is treated as empty)

    Returns:
        NormalizedText with one original offset per normalized character
    """
    if not text:
        return NormalizedText()

    chars: List[str] = []
    index_map: List[int] = []
    skip_link_destination = False

    def push_space(index: int):
        # Never lead with a space and never emit two in a row
        if not chars or chars[-1] == ' ':
            return
        chars.append(' ')
        index_map.append(index)

    for index, char in enumerate(text):
        if skip_link_destination:
            if char == ')':
                skip_link_destination = False
            continue

        if char == '(' and index > 0 and text[index - 1] == ']':
            skip_link_destination = True
            continue

        if char == '!' and index + 1 < len(text) and text[index + 1] == '[':
            continue

        if char in MARKDOWN_CONTROL_CHARS or char in BRACKET_CHARS:
            continue

        char = SMART_QUOTE_MAP.get(char, char)

        if char.isspace():
            push_space(index)
            continue

        folded = _fold_character(char)

        # A bare combining mark folds to "" and counts as whitespace
        if not _is_letter_or_number(folded):
            push_space(index)
            continue

        for c in folded:
            chars.append(c)
            index_map.append(index)

    if chars and chars[-1] == ' ':
        chars.pop()
        index_map.pop()

    return NormalizedText(normalized=''.join(chars), index_map=index_map)


# ============================================================================
# MATCHING
# ============================================================================

def find_quote_matches(normalized_text: str, normalized_quote: str) -> List[QuoteMatch]:
    """
    Find all non-overlapping occurrences, scanning left to right.

    Each search resumes at the end of the previous match.
    """
    matches: List[QuoteMatch] = []
    if not normalized_quote:
        return matches

    quote_length = len(normalized_quote)
    search_index = 0

    while search_index <= len(normalized_text) - quote_length:
        found_index = normalized_text.find(normalized_quote, search_index)
        if found_index == -1:
            break
        matches.append(QuoteMatch(start_norm=found_index, end_norm=found_index + quote_length))
        search_index = found_index + quote_length

    return matches


def clamp_occurrence(occurrence: Any) -> int:
    """
    Positive whole-number occurrences pass through; anything else becomes 1.

    Integral floats such as 2.0 count as whole numbers.
    """
    if isinstance(occurrence, bool):
        return 1
    if isinstance(occurrence, float) and occurrence.is_integer():
        occurrence = int(occurrence)
    if not isinstance(occurrence, int) or occurrence < 1:
        return 1
    return occurrence


def select_occurrence(matches: List[QuoteMatch], occurrence: Any = 1) -> Optional[QuoteMatch]:
    """
    Pick the 1-based occurrence from the matches.

    NOTE: an occurrence past the last match silently falls back to the FIRST
    match rather than failing. Callers relying on a specific occurrence
    should check len(find_quote_matches(...)) themselves.
    """
    if not matches:
        return None
    safe_occurrence = clamp_occurrence(occurrence)
    if safe_occurrence <= len(matches):
        return matches[safe_occurrence - 1]
    return matches[0]


# ============================================================================
# HIGHLIGHTING
# ============================================================================

def highlight_quote(
    text: Optional[str],
    quote: Optional[str],
    occurrence: Any = 1,
    highlight_class: str = DEFAULT_HIGHLIGHT_CLASS,
    debug: Optional[bool] = None
) -> List[Segment]:
    """
    Split text into plain and highlighted segments around one quote occurrence.

    Args:
        text: Narrative text to search (OBS frame, rendered verse, ...)
        quote: Quote to locate, e.g. from a translation note
        occurrence: 1-based occurrence to highlight; invalid values mean 1,
            values past the last match fall back to the first match
        highlight_class: Style class attached to the highlight segment
        debug: Trace the call on stderr (defaults to VERSE_ENGINE_DEBUG)

    Returns:
        Segments whose texts concatenate to exactly `text`. Without a match
        this is a single TextSegment holding the whole text.
    """
    if debug is None:
        debug = DEBUG

    _debug_log(f"input: text={text!r} quote={quote!r} occurrence={occurrence!r} "
               f"class={highlight_class!r}", debug)

    if not text:
        return [TextSegment(text='')]

    normalized_text = normalize_markdown_text(text)
    normalized_quote = normalize_markdown_text(quote)

    _debug_log(f"normalized: text={normalized_text.normalized!r} "
               f"quote={normalized_quote.normalized!r}", debug)

    if not normalized_quote.normalized or normalized_quote.normalized not in normalized_text.normalized:
        return [TextSegment(text=text)]

    matches = find_quote_matches(normalized_text.normalized, normalized_quote.normalized)
    for number, match in enumerate(matches, 1):
        _debug_log(f"match {number}: [{match.start_norm}, {match.end_norm})", debug)

    selected = select_occurrence(matches, occurrence)
    if selected is None:
        return [TextSegment(text=text)]

    _debug_log(f"selected: occurrence={clamp_occurrence(occurrence)} "
               f"match=[{selected.start_norm}, {selected.end_norm}) of {len(matches)}", debug)

    try:
        highlight_start, highlight_end = normalized_text.original_span(
            selected.start_norm, selected.end_norm
        )
    except IndexError as e:
        _debug_log(f"index map miss, returning text unchanged: {e}", debug)
        return [TextSegment(text=text)]

    _debug_log(f"range: [{highlight_start}, {highlight_end}) = "
               f"{text[highlight_start:highlight_end]!r}", debug)

    segments: List[Segment] = []

    if highlight_start > 0:
        segments.append(TextSegment(text=text[:highlight_start]))

    segments.append(HighlightSegment(
        text=text[highlight_start:highlight_end],
        class_name=highlight_class
    ))

    if highlight_end < len(text):
        segments.append(TextSegment(text=text[highlight_end:]))

    _debug_log(f"segments: {[s.to_dict() for s in segments]}", debug)

    return segments


def highlight_quote_with_options(
    text: Optional[str],
    quote: Optional[str],
    options: Optional[HighlightOptions] = None
) -> List[Segment]:
    """highlight_quote driven by a HighlightOptions bundle."""
    options = options or HighlightOptions()
    return highlight_quote(
        text,
        quote,
        occurrence=options.occurrence,
        highlight_class=options.highlight_class,
        debug=options.debug or DEBUG
    )


def highlight_quote_dicts(
    text: Optional[str],
    quote: Optional[str],
    occurrence: Any = 1,
    highlight_class: str = DEFAULT_HIGHLIGHT_CLASS
) -> List[Dict[str, Any]]:
    """JSON-ready form of highlight_quote for the bridge."""
    return [s.to_dict() for s in highlight_quote(text, quote, occurrence, highlight_class)]
