"""Repository identifier extraction.

The normalized ``owner/repo`` slug is the join key between feed sources and
catalog entries. Both sides hand arbitrary URL strings to
:func:`extract_repo_slug`, so it has to accept anything and fail soft.
"""

GITHUB_HOST_MARKER = "github.com/"
RELEASES_MARKER = "/releases"


def extract_repo_slug(url: str) -> str:
    """Extract ``owner/repo`` from a GitHub URL, or ``""`` if there is none.

    Examples:
        >>> extract_repo_slug("https://github.com/kubernetes/kubernetes/releases.atom")
        'kubernetes/kubernetes'
        >>> extract_repo_slug("github.com/cilium/cilium/")
        'cilium/cilium'
        >>> extract_repo_slug("https://example.com/x")
        ''
    """
    if not isinstance(url, str):
        return ""

    idx = url.find(GITHUB_HOST_MARKER)
    if idx == -1:
        return ""

    remainder = url[idx + len(GITHUB_HOST_MARKER) :]

    releases_idx = remainder.find(RELEASES_MARKER)
    if releases_idx != -1:
        return remainder[:releases_idx]

    first_slash = remainder.find("/")
    second_slash = remainder.find("/", first_slash + 1) if first_slash != -1 else -1
    if second_slash == -1:
        # 不足两段时原样返回，如 "owner" 或 "owner/"
        return remainder
    return remainder[:second_slash]
