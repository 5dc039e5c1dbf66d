#!/usr/bin/env python3
"""
Per-orthogroup working directory with guaranteed cleanup
"""
import os
import logging
from typing import Optional, Set

from orthocds.core.file_utils import create_fresh_dir, remove_path


class OrthogroupWorkspace:
    """Working directory owned by one orthogroup

    On a committed exit only the files registered with keep() survive (all
    files survive when keep_intermediates is set). On any other exit the
    whole directory is removed.
    """

    def __init__(self, root: str, orthogroup_id: str, keep_intermediates: bool = False,
                 logger: Optional[logging.Logger] = None):
        self.path = os.path.join(root, orthogroup_id)
        self.orthogroup_id = orthogroup_id
        self.keep_intermediates = keep_intermediates
        self.logger = logger or logging.getLogger("orthocds.pipelines.targeted.workspace")
        self._kept: Set[str] = set()
        self._committed = False

    def __enter__(self) -> 'OrthogroupWorkspace':
        create_fresh_dir(self.path)
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if self._committed and exc_type is None:
            if not self.keep_intermediates:
                self._remove_scratch()
        else:
            self.logger.debug(f"Removing working directory of orthogroup {self.orthogroup_id}")
            remove_path(self.path)
        return False

    def file(self, name: str) -> str:
        """Path of a file inside the workspace"""
        return os.path.join(self.path, name)

    def keep(self, path: str) -> str:
        """Mark a file as a curated output"""
        self._kept.add(os.path.abspath(path))
        return path

    def commit(self) -> None:
        """Declare the orthogroup finished; curated outputs will be retained"""
        self._committed = True

    def _remove_scratch(self) -> None:
        for name in os.listdir(self.path):
            candidate = os.path.join(self.path, name)
            if os.path.abspath(candidate) not in self._kept:
                remove_path(candidate)
