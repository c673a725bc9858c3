"""
Asset staging.

Downloads the files of a remote folder and mirrors them under the scratch
workspace so the converter can resolve includes and images locally.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Sequence, Union

from .contents_client import RemoteFile
from .fetcher import AssetFetcher
from ..utils.file_manager import Workspace
from ..utils.worker_pool import run_bounded


class AssetStager:
    def __init__(self, fetcher: AssetFetcher, workspace: Workspace, max_workers: int = 8):
        self.fetcher = fetcher
        self.workspace = workspace
        self.max_workers = max_workers
        self.logger = logging.getLogger(__name__)

    def stage(self, files: Sequence[RemoteFile], subfolder: str, binary: bool = False) -> List[Path]:
        """
        Download every file, then write them all under <workspace>/<subfolder>.

        All downloads finish before any write starts. A failed download or
        write fails the whole call; files already written stay on disk.

        Returns:
            Written paths, in the order of `files`
        """
        files = list(files)
        self.logger.info(f"Downloading {len(files)} files for {subfolder}/")
        contents: List[Union[str, bytes]] = run_bounded(
            lambda f: self.fetcher.fetch(f.download_url, binary=binary),
            files,
            self.max_workers,
        )

        target_dir = self.workspace.ensure_dir(subfolder)

        def save(pair):
            remote, content = pair
            path = self.workspace.path_for(subfolder, remote.name)
            if binary:
                return self.workspace.write_bytes(path, content)
            return self.workspace.write_text(path, content)

        written = run_bounded(save, list(zip(files, contents)), self.max_workers)
        self.logger.info(f"Staged {len(written)} files to {target_dir}")
        return written
