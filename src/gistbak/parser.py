import re
from dataclasses import dataclass
from urllib.parse import urlsplit

from .errors import InvalidCloneUrl

SCHEMES = ("https", "http", "git", "ssh")
NAME_PATTERN = re.compile(r"[A-Za-z0-9._-]+")


@dataclass(frozen=True)
class GistRepo:
    url: str
    name: str

    def __str__(self) -> str:
        return self.name


def parse_url(url: str) -> GistRepo:
    """Derive the local directory name of a gist clone url.

    https://gist.github.com/aa5a315d61ae9438b18d.git -> aa5a315d61ae9438b18d
    https://gist.github.com/owner/aa5a315d61ae9438b18d.git -> aa5a315d61ae9438b18d
    """

    parts = urlsplit(url.strip())
    if parts.scheme not in SCHEMES:
        raise InvalidCloneUrl(url, f"unsupported scheme {parts.scheme!r}")
    if not parts.netloc:
        raise InvalidCloneUrl(url, "missing host")

    segments = [s for s in parts.path.split("/") if s]
    if len(segments) == 0:
        raise InvalidCloneUrl(url, "missing repository path")

    name = segments[-1].removesuffix(".git")
    if name in ("", ".", "..") or NAME_PATTERN.fullmatch(name) is None:
        raise InvalidCloneUrl(url, f"bad repository name {segments[-1]!r}")

    return GistRepo(url=url.strip(), name=name)
