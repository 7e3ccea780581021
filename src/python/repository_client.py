"""
Repository helpers for adding a resource by URL

Users can add a Door43 repository that is not in the catalog listing by
pasting its URL (or a short owner/repo[/ref] path). This module parses and
validates those inputs and looks up the repository metadata the workspace
needs to open it.

API used (Gitea on git.door43.org):
- Repository:    GET {server}/api/v1/repos/{owner}/{repo}
- Catalog entry: GET {server}/api/v1/catalog/search?limit=1&owner={owner}&name={repo}
"""

import os
import sys
from dataclasses import dataclass
from typing import Optional, Dict, Any

import requests

# ============================================================================
# CONFIGURATION
# ============================================================================

DOOR43_HOST = "git.door43.org"
DEFAULT_SERVER = os.environ.get('DOOR43_SERVER', f"https://{DOOR43_HOST}")
DEFAULT_REF = "master"
REQUEST_TIMEOUT = 10  # seconds


# ============================================================================
# DATA STRUCTURES
# ============================================================================

@dataclass
class RepositoryLocation:
    """Owner, repository name and ref (branch or tag) of a Door43 repo."""
    owner: str
    repo: str
    ref: str = DEFAULT_REF

    def to_dict(self) -> Dict[str, Any]:
        return {
            'owner': self.owner,
            'repo': self.repo,
            'ref': self.ref,
        }


# ============================================================================
# URL PARSING
# ============================================================================

def parse_repository_url(url: Any) -> Optional[RepositoryLocation]:
    """
    Parse a repository URL or short path.

    Supports:
    - Full URL: https://git.door43.org/owner/repo/raw/branch/master/...
    - Short path: owner/repo
    - Short path with ref: owner/repo/ref

    Args:
        url: Repository URL or path

    Returns:
        RepositoryLocation, or None if the input cannot be parsed
    """
    if not url or not isinstance(url, str):
        return None

    url = url.strip()

    if DOOR43_HOST in url:
        url_parts = url.split('/')
        if DOOR43_HOST in url_parts:
            owner_index = url_parts.index(DOOR43_HOST) + 1
            if owner_index < len(url_parts) and url_parts[owner_index]:
                owner = url_parts[owner_index]
                repo = url_parts[owner_index + 1] if owner_index + 1 < len(url_parts) else ''
                # Ref sits after raw/branch or raw/tag
                ref = DEFAULT_REF
                if 'raw' in url_parts:
                    raw_index = url_parts.index('raw')
                    if (raw_index > 0 and raw_index + 2 < len(url_parts)
                            and url_parts[raw_index + 1] and url_parts[raw_index + 2]):
                        ref = url_parts[raw_index + 2]
                if owner and repo:
                    return RepositoryLocation(owner=owner, repo=repo, ref=ref)
                return None

    parts = [p for p in url.split('/') if p]
    if len(parts) >= 2:
        return RepositoryLocation(
            owner=parts[0],
            repo=parts[1],
            ref=parts[2] if len(parts) > 2 else DEFAULT_REF
        )

    return None


def is_valid_repository_url(url: Any) -> bool:
    """True if the input parses as a repository URL or short path."""
    if not url or not isinstance(url, str):
        return False
    return parse_repository_url(url) is not None


# ============================================================================
# DOOR43 API CLIENT
# ============================================================================

class Door43Client:
    """Client for the Door43 repository and catalog endpoints."""

    def __init__(self, server: str = DEFAULT_SERVER, timeout: float = REQUEST_TIMEOUT):
        self.server = server.rstrip('/')
        self.timeout = timeout

    def _get_json(self, url: str, params: Optional[Dict[str, Any]] = None) -> Optional[Any]:
        """GET a JSON document; None on HTTP or transport errors."""
        try:
            response = requests.get(url, params=params, timeout=self.timeout)
            if response.status_code == 200:
                return response.json()
            print(f"  ⚠ HTTP {response.status_code} for {url}", file=sys.stderr)
        except requests.RequestException as e:
            print(f"  ⚠ Request error for {url}: {e}", file=sys.stderr)
        except ValueError as e:
            print(f"  ⚠ Invalid JSON from {url}: {e}", file=sys.stderr)
        return None

    def _catalog_entry(self, owner: str, repo: str) -> Optional[Dict[str, Any]]:
        data = self._get_json(
            f"{self.server}/api/v1/catalog/search",
            params={'limit': 1, 'owner': owner, 'name': repo}
        )
        if isinstance(data, dict) and data.get('data'):
            return data['data'][0]
        return None

    def fetch_repository_metadata(self, owner: str, repo: str) -> Optional[Dict[str, Any]]:
        """
        Fetch the metadata needed to open a repository as a resource.

        The catalog entry is preferred (it knows subject and language). When
        the repository is not in the catalog, basic repository info is used
        and subject/language stay None.

        Returns:
            Metadata dict, or None if the repository cannot be fetched
        """
        repo_data = self._get_json(f"{self.server}/api/v1/repos/{owner}/{repo}")
        if not isinstance(repo_data, dict) or not repo_data:
            return None

        entry = self._catalog_entry(owner, repo)
        if entry:
            try:
                return {
                    'id': entry['id'],
                    'owner': str(entry['owner']).lower(),
                    'name': entry['name'],
                    'subject': entry.get('subject'),
                    'title': entry.get('title'),
                    'languageId': str(entry.get('language', '')).lower() or None,
                    'ref': entry.get('branch_or_tag_name'),
                    'link': f"{entry['full_name']}/{entry.get('branch_or_tag_name')}",
                    'isTcReady': False,
                }
            except KeyError as e:
                print(f"  ⚠ Incomplete catalog entry for {owner}/{repo}: missing {e}", file=sys.stderr)

        return {
            'owner': owner.lower(),
            'name': repo,
            'ref': repo_data.get('default_branch') or DEFAULT_REF,
            'title': repo_data.get('name') or repo,
            'subject': None,
            'languageId': None,
            'link': f"{owner}/{repo}",
            'isTcReady': False,
        }


def fetch_repository_metadata(owner: str, repo: str, server: str = DEFAULT_SERVER) -> Optional[Dict[str, Any]]:
    """Convenience wrapper around Door43Client.fetch_repository_metadata."""
    return Door43Client(server=server).fetch_repository_metadata(owner, repo)
