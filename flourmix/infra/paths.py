from pathlib import Path

from flourmix.utilities.config import DATA_DIR

# Each collaborator table is stored as <DATA_DIR>/<table>.json
SAVED_MIXES_TABLE = 'saved_mixes'


def table_file(table: str, data_dir: Path = DATA_DIR) -> Path:
    return Path(data_dir) / f'{table}.json'


__all__ = ['DATA_DIR', 'SAVED_MIXES_TABLE', 'table_file']
