from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class Paths:
    work_dir: Path
    data_dir: Path
    schema_dir: Path
    userdata_dir: Path

    @property
    def catalog_path(self) -> Path:
        return self.data_dir / "catalog.json"


def get_paths() -> Paths:
    package_dir = Path(__file__).resolve().parent
    # runtime files belong to the caller, not the installed package
    work_dir = Path.cwd()
    data_dir = package_dir / "data"
    schema_dir = data_dir / "schemas"
    userdata_dir = work_dir / "userdata"
    return Paths(
        work_dir=work_dir,
        data_dir=data_dir,
        schema_dir=schema_dir,
        userdata_dir=userdata_dir,
    )
