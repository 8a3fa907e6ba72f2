from __future__ import annotations
from enum import Enum

from pydantic import BaseModel

class Theme(str, Enum):
    light = "light"
    dark = "dark"

class ThemeUpdate(BaseModel):
    theme: Theme
