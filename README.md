# megatrom

megatrom is a small teaching storage engine. It simulates a hard disk as a
tree of directories, with one directory per plate, surface and track and one
text file per sector. It then loads the rows of CSV relations into those
sector files. Sectors are grouped into blocks.

Each sector file starts with a fixed-width header line. The header has
`#`-separated, zero-padded integer fields. Field 0 is the bytes used. Field 2
is the record size. Field 3 is the record count. Field 4 is the largest count
the sector or block may hold. The widths of the fields are read from a header
schema file.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Files under the root directory

All files live under one root directory. By default this is the current
working directory. `megatrom.layout.Layout` holds every path:

- `DiscoLocal/platoP/superficieS/pistaT/sectorN.txt`: the sector files.
- `rutas_sectores/rutas.txt`: the route list of every sector outside the
  middle track.
- `rutas_sectores/cilindroMedio.txt`: the route list of the middle-track
  sectors. These sectors serve as blocks.
- `archivo_info_Disco/info_disco.txt` and `info_bloque.txt`: the saved disk
  geometry and the number of sectors per block.
- `archivos_esquema/`: the per-column maximum lengths and the relation schemas
  that are built from the CSV files.

Each route line has the form `0#<path>`. `0` means free. Once the entry is
full, the `0` is changed to `1`.

megatrom does not create some input files. You must supply them under the root:

- `archivos_estructura_bloque/head_bloque_fijo.txt`: the header template
  copied into every sector.
- `archivos_esquema/esquema_registro_bloques.txt`: the header field widths,
  `#`-separated.
- `archivos_csv/TitanicG.csv` and `archivos_csv/Housing.csv`: the relations.
- `archivos_esquema/datos_titanic.txt` and `datos_housing.txt`: one line of
  `#`-separated column types for each relation.

## Interactive use

```
megatrom [--root DIR]
```

This opens the menu:

- `0`: load the geometry and block size saved by an earlier run.
- `1`: create a custom disk. You give the plates, the tracks per surface, the
  sectors per track, the sector size and the sectors per block.
- `2`: create the default disk. It has 8 plates with 2 surfaces each, 10
  tracks, 15 sectors of 1024 bytes each, and 4 sectors per block.
- `3`: choose the Titanic or Housing relation. megatrom builds the relation's
  schema, then inserts one row, N rows or every row.
- `4`: print the saved total capacity, the free bytes and the used bytes.
- `8`: quit.

When a step fails because a file is missing, a value is invalid or no sector
is free, megatrom prints an error and shows the menu again.

## Library use

```python
from megatrom.layout import Layout
from megatrom.disk import Disk
from megatrom.storage import StorageManager
from megatrom.menu import use_default_disk

layout = Layout("/tmp/disk-root")
manager = StorageManager(layout=layout)
disk = Disk()
use_default_disk(manager, disk)   # needs the header template and schema files
print(manager.total_blocks, manager.free_capacity())
```

The modules are:

- `megatrom.layout`: `Layout`, which holds every path, `sector_path()`, and
  `ensure_dirs()`.
- `megatrom.disk`: `Disk`, which covers the geometry (`custom()` and
  `static_default()`), `create()` for the sector files, `compute_capacity()`,
  and `save()`.
- `megatrom.controller`: `DiskController.insert()`, which appends a record line
  to a sector file.
- `megatrom.csvtools`: quote-aware CSV splitting (`split_csv_line`), the
  longest line (`longest_record_length`), per-column maximum lengths
  (`find_max_lengths`), and `build_schema`. `build_schema` writes
  `relation#attr#type#length#...`.
- `megatrom.blockheader`: field parsing, and the in-place header updates
  `update_header` and `update_header_block`. These return `False` when the
  sector or block is full.
- `megatrom.availability`: `available_sector()`, `check_full_sectors()`,
  `check_full_blocks()` and `mark_full()`.
- `megatrom.storage`: `StorageManager`, which covers block arithmetic, route
  file generation, handing out sectors to blocks, and record insertion.
- `megatrom.menu`: the menu actions, the CSV insert helpers and `main()`.

## What it does not do

megatrom only places records on the simulated disk. It has no way to query
records, read them back, update them or delete them. It also has no index.
It loads only the two fixed relations named above.