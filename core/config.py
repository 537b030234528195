"""
Settings loader for the mapper (logging, Neo4j, run options).
"""
from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

DEFAULT_SETTINGS_PATH = Path("config/default.yaml")


class Settings:
    """Load YAML settings with env overlay."""

    def __init__(self, path: Optional[str | Path] = None):
        self.path = Path(path) if path else DEFAULT_SETTINGS_PATH
        self.required = path is not None
        load_dotenv()
        self.data = self._load()

    def _load(self) -> Dict[str, Any]:
        if not self.path.exists():
            if self.required:
                raise FileNotFoundError(f"Settings not found: {self.path}")
            return {}
        with self.path.open('r', encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}
        return data

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)

    @property
    def logging(self) -> Dict[str, Any]:
        return self.data.get('logging', {})

    @property
    def run(self) -> Dict[str, Any]:
        return self.data.get('run', {})

    @property
    def log_every(self) -> int:
        return int(self.run.get('log_every', 1000))

    @property
    def enable_progress_bar(self) -> bool:
        return bool(self.run.get('enable_progress_bar', False))

    @property
    def neo4j(self) -> Dict[str, Any]:
        cfg = dict(self.data.get('neo4j', {}))
        cfg.setdefault('uri', os.getenv('NEO4J_URI', 'bolt://localhost:7687'))
        cfg.setdefault('user', os.getenv('NEO4J_USERNAME', 'neo4j'))
        cfg.setdefault('password', os.getenv('NEO4J_PASSWORD', 'password'))
        cfg.setdefault('database', os.getenv('NEO4J_DATABASE'))
        return cfg
