"""Hatchling build hook that stamps wheels with the git commit of the build.

The generated ``wrapedit/_build_info.py`` is what ``wrapedit --version``
falls back to when it runs outside a git checkout.
"""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Any

from hatchling.builders.hooks.plugin.interface import BuildHookInterface


class CustomBuildHook(BuildHookInterface):
    """Writes wrapedit/_build_info.py with the git commit being built."""

    def initialize(self, version: str, build_data: dict[str, Any]) -> None:
        """Write the build info module and ship it in the wheel."""
        self._generate_build_info()
        build_data.setdefault("artifacts", []).append("wrapedit/_build_info.py")

    def _generate_build_info(self) -> None:
        """Record COMMIT and DATE (None when git is unavailable)."""
        project_root = Path(self.root)
        target_path = project_root / "wrapedit" / "_build_info.py"

        commit = self._run_git(["rev-parse", "HEAD"], cwd=project_root)
        date = self._run_git(["show", "-s", "--format=%cI", "HEAD"], cwd=project_root)

        content = (
            "# Auto-generated at build time.\n"
            f"COMMIT = {commit!r}\n"
            f"DATE = {date!r}\n"
        )
        target_path.write_text(content, encoding="utf-8")

    def _run_git(self, args: list[str], cwd: Path) -> str | None:
        """Output of a git command, or None if it fails or prints nothing."""
        try:
            out = subprocess.check_output(["git", *args], cwd=str(cwd), stderr=subprocess.DEVNULL)
            return out.decode().strip() or None
        except (subprocess.CalledProcessError, FileNotFoundError, OSError):
            # Build should not fail just because git is unavailable
            return None
