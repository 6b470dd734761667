"""Display helpers shared by the listing and admin views."""

import re
from datetime import datetime
from typing import Optional
from urllib.parse import quote

import pytz

from gabonshop.config import get_settings

settings = get_settings()
tz = pytz.timezone(settings.TIMEZONE)

MONTHS_FR = [
    "janv.", "févr.", "mars", "avr.", "mai", "juin",
    "juil.", "août", "sept.", "oct.", "nov.", "déc.",
]
DAY_MS = 86_400_000
GABON_PREFIX = "241"


def format_price(price: Optional[float]) -> str:
    """XAF amount with French grouping; no price (or 0) reads as negotiable."""
    if not price:
        return "Prix à débattre"
    grouped = f"{round(price):,}".replace(",", " ")
    return f"{grouped} FCFA"


def format_listing_date(created_at: Optional[int], now: Optional[int] = None) -> str:
    """'Aujourd'hui' for listings younger than a day, else '05 mars'."""
    if not created_at:
        return ""
    if now is None:
        now = int(datetime.now(tz).timestamp() * 1000)
    if now - created_at < DAY_MS:
        return "Aujourd'hui"
    posted = datetime.fromtimestamp(created_at / 1000, tz)
    return f"{posted.day:02d} {MONTHS_FR[posted.month - 1]}"


def format_whatsapp_number(raw_phone: Optional[str]) -> Optional[str]:
    """Digits for wa.me links, with the Gabon country code."""
    if not raw_phone:
        return None
    cleaned = re.sub(r"[\s\-()]", "", str(raw_phone))
    if cleaned.startswith("0"):
        cleaned = GABON_PREFIX + cleaned[1:]
    if not cleaned.startswith(GABON_PREFIX) and not cleaned.startswith("+"):
        cleaned = GABON_PREFIX + cleaned
    return cleaned


def whatsapp_link(phone: Optional[str], title: str) -> Optional[str]:
    number = format_whatsapp_number(phone)
    if not number:
        return None
    message = f'Bonjour, je suis intéressé par votre produit : "{title}".'
    return f"https://wa.me/{number.lstrip('+')}?text={quote(message)}"
