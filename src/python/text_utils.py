"""
Small text helpers shared by the resource cards.
"""

import re
from typing import Any, Dict, Optional, Union

# [[rc://...]] style links used in translation notes and words
DOUBLE_BRACKET_LINK_PATTERN = r'\[{2}\S+\]{2}'


def fix_url(content: Optional[str]) -> Optional[str]:
    """
    Turn [[target]] links into markdown links: [target](target).

    Links are rewritten left to right, one at a time.
    """
    if not content:
        return content

    links = re.findall(DOUBLE_BRACKET_LINK_PATTERN, content)
    if not links:
        return content

    for link in links:
        target = re.sub(r'\[{2}|\]{2}', '', link)
        content = content.replace('[[', f'[{target}](', 1).replace(']]', ')', 1)

    return content


def package_langs(lang_obj: Optional[Dict[str, Any]]) -> Union[str, bool]:
    """
    Display name of a language: "Native (English)", or just the native name
    when both names are the same or the English one is empty.
    """
    if not lang_obj:
        return False
    lang = lang_obj.get('lang')
    eng = lang_obj.get('eng')
    if eng and lang != eng:
        return f"{lang} ({eng})"
    return lang
