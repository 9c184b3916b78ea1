"""
Store Loader
Reads store records from the shopping trip spreadsheet
"""

from pathlib import Path
from typing import List, NamedTuple, Tuple

import pandas as pd

from shopping_trip.errors import StoreFileError
from shopping_trip.utils.domains import normalize_domain

REQUIRED_COLUMNS = ['xfas_url', 'merchant_site_url']


class StoreRecord(NamedTuple):
    """One row of the input sheet"""
    store_id: int
    store_name: str
    xfas_url: str
    merchant_site_url: str
    network_id: int

    @property
    def label(self) -> str:
        return f"{self.store_name} (ID: {self.store_id})"


def _is_blank(value) -> bool:
    if value is None or pd.isna(value):
        return True
    return str(value).strip() == ''


def _to_int(value, default: int) -> int:
    if _is_blank(value):
        return default
    try:
        return int(float(str(value).strip()))
    except (TypeError, ValueError, OverflowError):
        return default


def _to_str(value) -> str:
    return '' if _is_blank(value) else str(value).strip()


def _read_sheet(path: Path) -> pd.DataFrame:
    if path.suffix.lower() == '.csv':
        return pd.read_csv(path, dtype=object)
    # First sheet only
    return pd.read_excel(path, sheet_name=0, dtype=object)


def load_stores(file_path: str) -> Tuple[StoreRecord, ...]:
    """
    Load store records in sheet order.

    - store_id falls back to the 1-based row position when blank or non-numeric
    - network_id falls back to 0
    - rows without an xfas_url, or whose merchant_site_url has no domain, are dropped

    Args:
        file_path: Path to .xlsx/.xls or .csv file

    Returns:
        Tuple of StoreRecord

    Raises:
        StoreFileError: File missing or a required column absent
    """
    path = Path(file_path)
    if not path.exists():
        raise StoreFileError(f"Store file not found: {path}")

    try:
        df = _read_sheet(path)
    except (ValueError, OSError) as e:
        raise StoreFileError(f"Could not read store file {path}: {e}") from e

    df.columns = [str(column).strip() for column in df.columns]
    missing = [column for column in REQUIRED_COLUMNS if column not in df.columns]
    if missing:
        raise StoreFileError(f"Store file {path} is missing columns: {', '.join(missing)}")

    stores: List[StoreRecord] = []
    for idx, row in enumerate(df.to_dict(orient='records')):
        store = StoreRecord(
            store_id=_to_int(row.get('store_id'), idx + 1),
            store_name=_to_str(row.get('store_name')),
            xfas_url=_to_str(row.get('xfas_url')),
            merchant_site_url=_to_str(row.get('merchant_site_url')),
            network_id=_to_int(row.get('network_id'), 0),
        )
        # a merchant value that normalizes to nothing could never be matched
        if store.xfas_url and normalize_domain(store.merchant_site_url):
            stores.append(store)

    return tuple(stores)


def filter_stores(stores, store_ids=None, limit=None) -> Tuple[StoreRecord, ...]:
    """Keep input order; optionally restrict to given ids and cap the count"""
    selected = [s for s in stores if not store_ids or s.store_id in set(store_ids)]
    if limit is not None:
        selected = selected[:limit]
    return tuple(selected)
