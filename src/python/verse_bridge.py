#!/usr/bin/env python3
"""
Verse Engine Python Bridge

This module provides a JSON-based subprocess interface for the front end to:
1. Render parser verse objects into display text
2. Highlight a translation-note quote inside OBS or verse text
3. Format note links and language labels for display
4. Parse and look up repositories added by URL

Protocol: Reads one JSON command from stdin, writes one JSON response to stdout.
Responses are JSON lines with {"type": "result", ...} or {"type": "error", ...}.
Diagnostics go to stderr only.
"""

import sys
import json
import traceback
from typing import Optional, Dict, Any

from verse_renderer import render_verse_text, render_chapter_text
from quote_highlighter import (
    DEFAULT_HIGHLIGHT_CLASS,
    HighlightOptions,
    highlight_quote_with_options,
    normalize_markdown_text,
)
from text_utils import fix_url, package_langs
from repository_client import (
    DEFAULT_SERVER,
    Door43Client,
    parse_repository_url,
    is_valid_repository_url,
)


# ============================================================================
# OUTPUT
# ============================================================================

def emit_error(error: str, command: Optional[str] = None):
    """Emit an error to stdout as JSON."""
    result = {
        "type": "error",
        "error": error,
        "command": command
    }
    print(json.dumps(result, ensure_ascii=False), flush=True)


def emit_result(data: Dict[str, Any]):
    """Emit the final result to stdout as JSON."""
    result = {
        "type": "result",
        **data
    }
    print(json.dumps(result, ensure_ascii=False), flush=True)


# ============================================================================
# COMMAND HANDLER
# ============================================================================

def handle_command(command: Dict[str, Any]) -> Dict[str, Any]:
    """
    Handle a command from the front end.

    Commands:
        - render_verse: Flatten one verse's verseObjects to text
        - render_chapter: Flatten every verse of a parsed chapter
        - highlight_quote: Split text into text/highlight segments
        - normalize_text: Show the matching form of a text (debugging aid)
        - fix_url: Turn [[target]] links into markdown links
        - package_langs: Display label for a language entry
        - parse_repository_url: Parse a repository URL or owner/repo path
        - fetch_repository_metadata: Look up a repository on Door43
        - check_dependencies: Check if all required packages are installed
    """
    cmd = command.get('command', '')

    if cmd == 'check_dependencies':
        return check_dependencies()

    elif cmd == 'render_verse':
        verse_objects = command.get('verseObjects')
        if verse_objects is not None and not isinstance(verse_objects, list):
            return {'error': 'verseObjects must be a list'}
        return {
            'text': render_verse_text(verse_objects, bool(command.get('showUnsupported', False)))
        }

    elif cmd == 'render_chapter':
        chapter = command.get('chapter')
        if chapter is not None and not isinstance(chapter, dict):
            return {'error': 'chapter must be an object'}
        return {
            'verses': render_chapter_text(chapter, bool(command.get('showUnsupported', False)))
        }

    elif cmd == 'highlight_quote':
        options = HighlightOptions(
            occurrence=command.get('occurrence', 1),
            highlight_class=command.get('className') or DEFAULT_HIGHLIGHT_CLASS,
            debug=bool(command.get('debug', False))
        )
        segments = highlight_quote_with_options(command.get('text'), command.get('quote'), options)
        return {'segments': [s.to_dict() for s in segments]}

    elif cmd == 'normalize_text':
        return normalize_markdown_text(command.get('text')).to_dict()

    elif cmd == 'fix_url':
        content = command.get('content')
        if content is not None and not isinstance(content, str):
            return {'error': 'content must be a string'}
        return {'content': fix_url(content)}

    elif cmd == 'package_langs':
        lang_obj = command.get('language')
        if lang_obj is not None and not isinstance(lang_obj, dict):
            return {'error': 'language must be an object'}
        return {'label': package_langs(lang_obj)}

    elif cmd == 'parse_repository_url':
        url = command.get('url')
        location = parse_repository_url(url)
        return {
            'valid': is_valid_repository_url(url),
            'repository': location.to_dict() if location else None
        }

    elif cmd == 'fetch_repository_metadata':
        owner = command.get('owner')
        repo = command.get('repo')
        if not owner or not repo:
            return {'error': 'owner and repo are required'}
        client = Door43Client(server=command.get('server') or DEFAULT_SERVER)
        return {'metadata': client.fetch_repository_metadata(owner, repo)}

    else:
        return {'error': f'Unknown command: {cmd}'}


def check_dependencies() -> Dict[str, Any]:
    """Check if all required Python packages are installed."""
    deps: Dict[str, Any] = {
        'requests': False,
    }

    try:
        import requests
        deps['requests'] = True
        deps['requests_version'] = str(requests.__version__)
    except ImportError:
        pass

    all_installed = all(deps.get(k, False) for k in ['requests'])

    return {
        'dependencies': deps,
        'all_installed': all_installed,
        'python_version': sys.version.split()[0]
    }


# ============================================================================
# MAIN ENTRY POINT
# ============================================================================

def main():
    """
    Main entry point for subprocess mode.
    Reads JSON commands from stdin and writes JSON responses to stdout.
    """
    # Ensure proper stdout encoding for JSON output
    for stream in (sys.stdout, sys.stderr):
        if hasattr(stream, 'reconfigure'):
            stream.reconfigure(encoding='utf-8')  # type: ignore[union-attr]

    # Read command from stdin
    try:
        input_data = sys.stdin.read()
        if not input_data.strip():
            emit_error("No input provided")
            return

        command = json.loads(input_data)
    except json.JSONDecodeError as e:
        emit_error(f"Invalid JSON input: {e}")
        return
    except Exception as e:
        emit_error(f"Error reading input: {e}")
        return

    if not isinstance(command, dict):
        emit_error("Command must be a JSON object")
        return

    # Process the command
    try:
        result = handle_command(command)
        emit_result(result)
    except Exception as e:
        emit_error(f"Error processing command: {e}\n{traceback.format_exc()}", command.get('command'))


if __name__ == "__main__":
    main()
