"""
Workspace path construction.

Every stage derives its directories from here so that the builder, the
publisher and artifact enumeration agree on where output lives.
"""

from __future__ import annotations

from pathlib import Path

from docpush.errors import InvalidJobDefinition
from docpush.sanitize import MASTER_BRANCH


def branch_suffix(branch_name: str) -> str:
    """``""`` for master, ``"-<branch>"`` for every other branch."""
    if branch_name == MASTER_BRANCH:
        return ""
    return f"-{branch_name}"


def repo_dir(workspace: str | Path, repo_name: str) -> Path:
    """
    Directory a repository is cloned into.

    The checkout is removed before every clone, so it must be a direct
    child of the workspace.

    Raises:
        InvalidJobDefinition: ``repo_name`` is ``.``/``..`` or otherwise
            does not name an entry directly inside ``workspace``
    """
    root = Path(workspace).resolve()
    if repo_name in ("", ".", "..") or (root / repo_name).parent != root:
        raise InvalidJobDefinition(
            f"job not valid: repo_name {repo_name!r} escapes the workspace",
            field="repo_name",
        )
    return Path(workspace) / repo_name


def output_dir(workspace: str | Path, repo_name: str, branch_name: str) -> Path:
    """Directory the site generator writes a branch's public output to."""
    return repo_dir(workspace, repo_name) / "build" / f"public{branch_suffix(branch_name)}"
