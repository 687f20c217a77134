import json
import os
import shutil
import logging
from pathlib import Path
from typing import Any, Optional, Union

from iconcraft.errors import OutputConflictError

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

PNG_SAVE_OPTIONS = {"optimize": True, "compress_level": 9}


class FileManager:
    """Filesystem operations used by the generators."""

    def exists(self, file_path: PathLike) -> bool:
        return Path(file_path).exists()

    def is_accessible(self, file_path: PathLike) -> bool:
        return os.access(file_path, os.R_OK)

    def ensure_directory(self, dir_path: PathLike) -> Path:
        path = Path(dir_path)
        path.mkdir(parents=True, exist_ok=True)
        return path

    def remove_directory(self, dir_path: PathLike, force: bool = False):
        if not force:
            raise OutputConflictError(f"Directory already exists: {dir_path}\nUse --force to overwrite")
        shutil.rmtree(dir_path)

    def prepare_output_directory(self, output_dir: PathLike, subdir_name: Optional[str], force: bool = False) -> Path:
        """
        Prepares the directory icons are written into.

        Args:
            output_dir: Base output directory.
            subdir_name: Subdirectory (e.g. 'AppIcon.appiconset'), or None to use output_dir directly.
            force: Overwrite an existing directory.

        Returns:
            Path: Full path to the prepared directory.
        """
        full_path = Path(output_dir) / subdir_name if subdir_name else Path(output_dir)

        if full_path.exists():
            if not force:
                raise OutputConflictError(f"Output directory already exists: {full_path}\nUse --force to overwrite")
            logger.warning(f"Output directory exists, overwriting (--force): {full_path}")
            # Only a dedicated subdirectory is wiped, never the caller's base directory
            if subdir_name:
                self.remove_directory(full_path, force=True)

        return self.ensure_directory(full_path)

    def write_image(self, image, file_path: PathLike) -> Path:
        path = Path(file_path)
        image.save(path, format="PNG", **PNG_SAVE_OPTIONS)
        return path

    def write_text(self, content: str, file_path: PathLike) -> Path:
        path = Path(file_path)
        path.write_text(content, encoding="utf-8")
        return path

    def write_json(self, file_path: PathLike, data: Any, indent: int = 2) -> Path:
        path = Path(file_path)
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=indent)
        return path

    def write_xml(self, file_path: PathLike, content: str) -> Path:
        return self.write_text(content, file_path)
