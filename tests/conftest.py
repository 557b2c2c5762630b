import subprocess
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Sequence

import pytest

from gistbak._listing import Gist


def make_gist(gist_id: str) -> Gist:
    return Gist(id=gist_id, git_pull_url=f"https://gist.github.com/{gist_id}.git")


class FakeLister:
    """Answers page requests from a script of responses, one per request."""

    def __init__(self, responses: Sequence[Sequence[Gist]]):
        self.responses = list(responses)
        self.requested: list[int] = []

    async def list_page(self, page: int) -> Sequence[Gist]:
        self.requested.append(page)
        if len(self.responses) == 0:
            return []
        return self.responses.pop(0)


def client_factory_for(lister: FakeLister):
    @asynccontextmanager
    async def factory(token, config):
        yield lister

    return factory


class FakeGit:
    """Stands in for subprocess.run, a clone creates the target directory."""

    def __init__(self):
        self.calls: list[tuple[list[str], Path]] = []

    def __call__(self, cmd, cwd=None, env=None, check=False, **kwargs):
        cmd = list(cmd)
        self.calls.append((cmd, Path(cwd)))
        if cmd[:2] == ["git", "clone"]:
            name = cmd[4]
            target = Path(cwd) / name
            target.mkdir()
            (target / ".git").mkdir()
            (target / f"{name}.txt").write_text(name)
        return subprocess.CompletedProcess(cmd, 0)

    def commands(self) -> list[str]:
        return [cmd[1] for cmd, _ in self.calls]


@pytest.fixture
def fake_git(monkeypatch):
    git = FakeGit()
    monkeypatch.setattr("gistbak.sync.subprocess.run", git)
    return git
