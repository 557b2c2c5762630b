import enum
import logging
import tarfile
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)


class ArchiveFormat(enum.Enum):
    BZIP2 = "bz2"
    GZIP = "gz"

    @property
    def mode(self) -> str:
        return f"w:{self.value}"


@dataclass(frozen=True)
class ArchiveRequest:
    format: ArchiveFormat
    path: Path


def create_archive(workspace: Path, request: ArchiveRequest) -> Path:
    """Pack the whole workspace tree into one compressed tar file."""

    output = request.path.resolve()
    workspace = workspace.resolve()

    def exclude_output(info: tarfile.TarInfo) -> tarfile.TarInfo | None:
        # the archive may be written inside the workspace it packs
        if workspace.parent.joinpath(info.name) == output:
            return None
        return info

    logger.info(f"archive {workspace} to {request.path} ({request.format.name.lower()})")
    try:
        with tarfile.open(output, request.format.mode) as tar:
            tar.add(workspace, arcname=workspace.name, filter=exclude_output)
    except BaseException:
        output.unlink(missing_ok=True)
        raise

    return output
