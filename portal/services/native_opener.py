"""
Native File Opener Service.

The web portal opened served files (TNA reports, application
attachments, project documents) in a new browser tab.  The desktop
client saves them locally and hands them to the operating system's
default application instead.
"""

from __future__ import annotations

import os
import subprocess
import sys
from pathlib import Path
from typing import Callable, Optional

from portal.logger import StructuredLogger
from portal.models.service_models import ServiceResult
from portal.services.base_service import BaseService

Launcher = Callable[[Path], None]


def launch_with_os(path: Path) -> None:
    """``os.startfile`` on Windows, ``open`` on macOS, ``xdg-open`` elsewhere.

    Raises:
        OSError: no handler could be started.
    """
    if sys.platform == "win32":
        os.startfile(path)  # type: ignore[attr-defined]
        return
    command = "open" if sys.platform == "darwin" else "xdg-open"
    subprocess.Popen([command, str(path)])  # noqa: S603


class NativeOpenerService(BaseService):
    """Open a saved file with the OS default application.

    Parameters
    ----------
    logger:
        Structured logger instance.
    launcher:
        Replaces :func:`launch_with_os`; tests pass a recorder.
    """

    def __init__(self, logger: StructuredLogger, launcher: Optional[Launcher] = None) -> None:
        super().__init__(logger)
        self._launch: Launcher = launcher or launch_with_os

    def open_file(self, path: Path) -> ServiceResult[Path]:
        if not path.is_file():
            self._logger.warning("Nothing to open at %s.", path)
            return ServiceResult(success=False, error=f"File not found: {path.name}", status_code=404)
        try:
            self._launch(path)
        except FileNotFoundError:
            self._logger.error("No OS handler available for %s.", path)
            return ServiceResult(
                success=False,
                error=f"No application is registered to open {path.suffix or 'this'} files. "
                f"The file was saved to {path}.",
                status_code=500,
            )
        except OSError as exc:
            self._logger.error("Opening %s failed: %s", path, exc)
            return ServiceResult(
                success=False,
                error=f"Could not open the file. It was saved to {path}.",
                status_code=500,
            )
        self._logger.info("Opened %s with the OS handler.", path)
        return ServiceResult(success=True, data=path)
