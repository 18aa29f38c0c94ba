"""
Sidebar ordering for converted documents.
"""

from typing import Dict, List

from mintport.schemas.migration import ConvertedFile


def _directory(path: str) -> str:
    return path.rsplit("/", 1)[0] if "/" in path else ""


def resolve_sidebar_position_conflicts(files: List[ConvertedFile]) -> List[ConvertedFile]:
    """
    Give every file a distinct position inside its directory.

    Files sharing a sidebar_position are ordered by path and numbered one
    after the other; gaps in the original numbering are kept where they do
    not collide.

    Args:
        files: Converted documents of one version

    Returns:
        Copies of the files with resolved_position set, root files first,
        then by directory depth and resolved position
    """
    ordered = sorted(files, key=lambda f: (f.sidebar_position, f.path))

    grouped: Dict[str, List[ConvertedFile]] = {}
    for file in ordered:
        grouped.setdefault(_directory(file.path), []).append(file)

    resolved: List[ConvertedFile] = []
    for dir_files in grouped.values():
        position = 1
        for i, file in enumerate(dir_files):
            resolved.append(file.model_copy(update={"resolved_position": position}))
            following = dir_files[i + 1] if i + 1 < len(dir_files) else None
            if following is not None and following.sidebar_position == file.sidebar_position:
                position += 1
            elif following is not None:
                position = max(position + 1, following.sidebar_position)
            else:
                position += 1

    return sorted(resolved, key=lambda f: (f.path.count("/"), f.resolved_position))
