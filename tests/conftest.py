import pytest
from pathlib import Path
from typing import Dict

def create_project_structure(base_path: Path, structure: Dict[str, str]) -> Path:
    """Creates files (and their parent directories) from a {relative_path: content} mapping."""
    for rel_path, content in structure.items():
        file_path = base_path / rel_path
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text(content)
    return base_path

@pytest.fixture
def site_root(tmp_path: Path) -> Path:
    """An empty, resolved directory to scan."""
    root = tmp_path / "site"
    root.mkdir()
    return root.resolve()

@pytest.fixture
def nested_index_tree(site_root: Path) -> Path:
    """index.md at the root and in each nested directory, nine files in total."""
    dirs = ["", "dirA", "dirA/a", "dirA/a/A", "dirA/b", "dirA/b/A", "dirA/c", "dirA/c/A", "dirB"]
    create_project_structure(site_root, {f"{d}/index.md".lstrip("/"): f"# {d or 'root'}\n" for d in dirs})
    return site_root
