import os
import logging
import zipfile
from pathlib import Path
from typing import Optional, Union

from iconcraft.errors import ArchiveError

logger = logging.getLogger(__name__)


class ArchiveManager:
    """Creates ZIP archives of generated icon directories."""

    def create_zip_archive(
        self,
        source_dir: Union[str, Path],
        output_path: Union[str, Path],
        archive_dir_name: Optional[str] = None,
        compression_level: int = 9,
    ) -> str:
        """
        Zips source_dir into output_path.

        Files are stored under archive_dir_name inside the archive, or at the
        archive root when no name is given.
        """
        source = Path(source_dir)
        if not source.is_dir():
            raise ArchiveError(f"Cannot archive missing directory: {source}")

        output = Path(output_path)
        try:
            output.parent.mkdir(parents=True, exist_ok=True)
            with zipfile.ZipFile(output, 'w', zipfile.ZIP_DEFLATED, compresslevel=compression_level) as zf:
                for root, _dirs, files in os.walk(source):
                    for name in sorted(files):
                        file_path = Path(root) / name
                        # Don't archive the archive itself when it lives inside source_dir
                        if file_path.resolve() == output.resolve():
                            continue
                        rel = file_path.relative_to(source).as_posix()
                        arcname = f"{archive_dir_name}/{rel}" if archive_dir_name else rel
                        zf.write(file_path, arcname)
        except (OSError, zipfile.BadZipFile) as e:
            raise ArchiveError(f"Failed to create archive {output}: {e}") from e

        logger.info(f"Created ZIP archive: {output}")
        return str(output)

    def get_stats(self, archive_path: Union[str, Path]) -> dict:
        with zipfile.ZipFile(archive_path, 'r') as zf:
            infos = zf.infolist()
            return {
                "total_bytes": Path(archive_path).stat().st_size,
                "total_files": len(infos),
            }
