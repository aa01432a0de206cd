"""File-system layout of the simulated disk and its bookkeeping files."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True)
class Layout:
    """Where every file the storage manager reads or writes lives, under one root."""

    root: Path = field(default_factory=Path.cwd)

    def __post_init__(self) -> None:
        object.__setattr__(self, "root", Path(self.root))

    @property
    def disk_dir(self) -> Path:
        return self.root / "DiscoLocal"

    @property
    def csv_dir(self) -> Path:
        return self.root / "archivos_csv"

    @property
    def schema_dir(self) -> Path:
        return self.root / "archivos_esquema"

    @property
    def routes_dir(self) -> Path:
        return self.root / "rutas_sectores"

    @property
    def info_dir(self) -> Path:
        return self.root / "archivo_info_Disco"

    @property
    def block_structure_dir(self) -> Path:
        return self.root / "archivos_estructura_bloque"

    @property
    def csv_titanic(self) -> Path:
        return self.csv_dir / "TitanicG.csv"

    @property
    def csv_housing(self) -> Path:
        return self.csv_dir / "Housing.csv"

    @property
    def types_titanic(self) -> Path:
        return self.schema_dir / "datos_titanic.txt"

    @property
    def types_housing(self) -> Path:
        return self.schema_dir / "datos_housing.txt"

    @property
    def max_lengths(self) -> Path:
        return self.schema_dir / "longitudes_maximas.txt"

    @property
    def schema_titanic(self) -> Path:
        return self.schema_dir / "esquema_titanic.txt"

    @property
    def schema_housing(self) -> Path:
        return self.schema_dir / "esquema_hosing.txt"

    @property
    def header_schema(self) -> Path:
        return self.schema_dir / "esquema_registro_bloques.txt"

    @property
    def header_template(self) -> Path:
        return self.block_structure_dir / "head_bloque_fijo.txt"

    @property
    def routes(self) -> Path:
        return self.routes_dir / "rutas.txt"

    @property
    def block_routes(self) -> Path:
        return self.routes_dir / "cilindroMedio.txt"

    @property
    def disk_info(self) -> Path:
        return self.info_dir / "info_disco.txt"

    @property
    def block_info(self) -> Path:
        return self.info_dir / "info_bloque.txt"

    def sector_path(self, plate: int, surface: int, track: int, sector: int) -> Path:
        """Path of the file that stands for one sector (all numbers start at 1)."""
        return (
            self.disk_dir
            / f"plato{plate}"
            / f"superficie{surface}"
            / f"pista{track}"
            / f"sector{sector}.txt"
        )

    def ensure_dirs(self) -> None:
        """Create the directories that hold the bookkeeping files."""
        for directory in (
            self.csv_dir,
            self.schema_dir,
            self.routes_dir,
            self.info_dir,
            self.block_structure_dir,
        ):
            directory.mkdir(parents=True, exist_ok=True)