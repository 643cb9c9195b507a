"""Next-up schemas"""

from typing import Literal

from ..models.constants import MEDIA_TYPES
from .base import CamelModel

MediaType = Literal[MEDIA_TYPES]


class NextUpEntry(CamelModel):
    media_id: int
    media_type: MediaType
