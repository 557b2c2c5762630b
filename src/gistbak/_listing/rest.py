from dataclasses import dataclass
from typing import Sequence

import orjson
from mashumaro.mixins.orjson import DataClassORJSONMixin

from ..errors import ListingError


@dataclass
class Gist(DataClassORJSONMixin):
    git_pull_url: str
    id: str = ""
    description: str | None = None
    public: bool = True
    html_url: str = ""

    def __str__(self) -> str:
        name = self.id or self.git_pull_url
        if self.description:
            return f"{name} ({self.description})"
        return name


def parse_listing(content: bytes | str) -> Sequence[Gist]:
    try:
        data = orjson.loads(content)
    except orjson.JSONDecodeError as e:
        raise ListingError(f"listing is not json: {e}") from e

    if not isinstance(data, list):
        raise ListingError(f"expected a json array, got {type(data).__name__}")

    # entries without a pull url cannot be cloned
    items = (item for item in data if isinstance(item, dict) and item.get("git_pull_url"))
    return [Gist.from_dict(item) for item in items]
