"""Backup schemas"""

from typing import Dict

from .base import CamelModel


class ImportResult(CamelModel):
    success: bool
    imported: Dict[str, int]
