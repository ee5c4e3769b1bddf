import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional

from omegaconf import OmegaConf, SCMode


@dataclass
class Settings:
    debug: bool = False
    """Log every resolution and load decision"""

    restore_originals: bool = True
    """Put the modules displaced by a stub back in `sys.modules` once the stub
    is removed"""

    force_color: bool = False
    """Colored log output even when stderr is not a terminal"""


def settings_path() -> Path:
    if path := os.environ.get("MODSTUB_SETTINGS"):
        return Path(path).expanduser()
    return Path("~/.config/modstub/settings.yaml").expanduser()


@lru_cache()
def get_settings(path: Optional[Path] = None) -> Settings:
    schema = OmegaConf.structured(Settings)

    path = path or settings_path()
    if not path.is_file():
        return OmegaConf.to_container(schema, structured_config_mode=SCMode.INSTANTIATE)

    conf = OmegaConf.load(path)
    return OmegaConf.to_container(
        OmegaConf.merge(schema, conf), structured_config_mode=SCMode.INSTANTIATE
    )
