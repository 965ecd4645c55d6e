# Menu models

from typing import List, Optional
from pydantic import BaseModel


class MenuItemInfo(BaseModel):
    """Orderable menu item, prices in rupees"""
    item_id: int
    item_code: Optional[str] = None
    item_name: str
    item_description: Optional[str] = None
    item_category: Optional[str] = None
    cuisine: Optional[str] = None
    menu_type: Optional[str] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    price: float
    is_veg: bool


class MenuGroup(BaseModel):
    """Items of one menu type, in display order"""
    menu_type: str
    items: List[MenuItemInfo]
