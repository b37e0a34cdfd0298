import os
from pathlib import Path
from typing import Union
import structlog

from sitescan.exceptions import DiscoveryError, RootNotFoundError, RootPermissionError

log = structlog.get_logger(__name__)

def resolve_scan_root(root: Union[str, os.PathLike]) -> Path:
    # resolves the root to an absolute directory we are able to list.
    raw_path = Path(root).expanduser()
    try:
        abs_root = raw_path.resolve(strict=True)
    except FileNotFoundError:
        raise RootNotFoundError(raw_path)
    except PermissionError as e:
        raise RootPermissionError(raw_path, e.strerror or str(e))
    except (OSError, RuntimeError) as e:
        raise DiscoveryError(f"cannot resolve scan root {raw_path}: {e}")

    if not abs_root.is_dir():
        raise DiscoveryError(f"scan root is not a directory: {abs_root}")

    try:
        with os.scandir(abs_root) as entries:
            next(entries, None)
    except PermissionError as e:
        raise RootPermissionError(abs_root, e.strerror or str(e))
    except OSError as e:
        raise DiscoveryError(f"cannot list scan root {abs_root}: {e}")

    log.debug("scan_root_resolved", given=str(root), resolved=str(abs_root))
    return abs_root
