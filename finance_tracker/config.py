from __future__ import annotations

import copy
from pathlib import Path
from typing import Dict

import yaml

DEFAULT_CONFIG: Dict[str, object] = {
    "store": "sheets",
    "store_modules": {
        "sheets": "finance_tracker.stores.sheets_store.SheetsStore",
        "csv": "finance_tracker.stores.csv_store.CSVStore",
    },
    "output_modules": {
        "json": "finance_tracker.outputs.json_output.JSONOutput",
        "excel": "finance_tracker.outputs.excel_output.ExcelOutput",
    },
    "google": {
        "service_account_file": "/path/to/service-account.json",
        "spreadsheet_id": "",
    },
    "csv_store_dir": "./data/tables",
    "cache_dir": "./data/cache",
    "export_dir": "./exports",
    "category_keywords": {
        "groceries": ["trader joe", "whole foods", "grocery"],
        "transport": ["lirr", "nyct", "omny", "train"],
        "bills": ["netflix", "planet fitness"],
        "amex": ["amex payment"],
        "capitalOne": ["capital one"],
    },
    "default_category": "flex",
}

CONFIG_PATH = Path("config.yaml")


def _merge_defaults(current: Dict[str, object], defaults: Dict[str, object]) -> Dict[str, object]:
    """Merge missing default keys into the current config recursively."""
    merged = dict(current)
    for key, value in defaults.items():
        if key not in merged:
            merged[key] = copy.deepcopy(value)
        elif isinstance(value, dict) and isinstance(merged[key], dict):
            merged[key] = _merge_defaults(merged[key], value)
    return merged


def load_config(path: Path | None = None) -> Dict[str, object]:
    target = Path(path) if path else CONFIG_PATH
    if not target.exists():
        return copy.deepcopy(DEFAULT_CONFIG)
    with target.open("r", encoding="utf-8") as fp:
        data = yaml.safe_load(fp) or {}
    return _merge_defaults(data, DEFAULT_CONFIG)


def save_config(config: Dict[str, object], path: Path | None = None) -> Path:
    target = Path(path) if path else CONFIG_PATH
    target.parent.mkdir(parents=True, exist_ok=True)
    with target.open("w", encoding="utf-8") as fp:
        yaml.safe_dump(config, fp, sort_keys=False)
    return target
