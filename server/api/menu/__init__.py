# Time-filtered restaurant menus

from .routes import router as menu_router
from .models import MenuItemInfo, MenuGroup

__all__ = [
    "menu_router",
    "MenuItemInfo",
    "MenuGroup"
]
