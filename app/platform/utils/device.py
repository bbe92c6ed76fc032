import re
from dataclasses import dataclass
from typing import Optional

from fastapi import Request

from app.platform.config import settings
from app.platform.logger import get_logger

logger = get_logger(__name__)


# Order matters: Edge and Opera UAs also contain "Chrome", Chrome UAs contain "Safari"
_BROWSER_PATTERNS = [
    ("Edge", re.compile(r"Edg(e|A|iOS)?/", re.I)),
    ("Opera", re.compile(r"(OPR/|Opera)", re.I)),
    ("Samsung Internet", re.compile(r"SamsungBrowser/", re.I)),
    ("Firefox", re.compile(r"(Firefox|FxiOS)/", re.I)),
    ("Chrome", re.compile(r"(Chrome|CriOS)/", re.I)),
    ("Safari", re.compile(r"Version/[\d.]+.*Safari/", re.I)),
    ("Internet Explorer", re.compile(r"(MSIE |Trident/)", re.I)),
]

_PLATFORM_PATTERNS = [
    ("iOS", re.compile(r"(iPhone|iPad|iPod)", re.I)),
    ("Android", re.compile(r"Android", re.I)),
    ("Windows", re.compile(r"Windows", re.I)),
    ("macOS", re.compile(r"Mac OS X|Macintosh", re.I)),
    ("ChromeOS", re.compile(r"CrOS", re.I)),
    ("Linux", re.compile(r"Linux", re.I)),
]

_BOT_PATTERN = re.compile(r"(bot|crawler|spider|crawling|curl|wget|python-requests|httpx)", re.I)
_TABLET_PATTERN = re.compile(r"(iPad|Tablet|PlayBook|Silk)|(Android(?!.*Mobile))", re.I)
_MOBILE_PATTERN = re.compile(r"(Mobile|iPhone|iPod|Android.*Mobile|Windows Phone|BlackBerry)", re.I)


@dataclass(frozen=True)
class DeviceInfo:
    ip_address: Optional[str]
    browser: str
    platform: str
    device: str


def get_client_ip(request: Request) -> Optional[str]:
    # First hop of X-Forwarded-For is the original client behind our proxy
    forwarded_for = request.headers.get("x-forwarded-for")
    if forwarded_for:
        first_hop = forwarded_for.split(",")[0].strip()
        if first_hop:
            return first_hop

    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip.strip()

    return request.client.host if request.client else None


def get_client_country(request: Request) -> Optional[str]:
    if not settings.COUNTRY_HEADER:
        return None

    country = request.headers.get(settings.COUNTRY_HEADER)
    if not country or country.upper() in ("XX", "T1"):
        return None
    return country.upper()[:2]


def parse_user_agent(user_agent: Optional[str]) -> tuple[str, str, str]:
    """Return (browser, platform, device class) for a User-Agent header."""
    if not user_agent:
        return "Unknown", "Unknown", "unknown"

    browser = next((name for name, pattern in _BROWSER_PATTERNS if pattern.search(user_agent)), "Unknown")
    platform = next((name for name, pattern in _PLATFORM_PATTERNS if pattern.search(user_agent)), "Unknown")

    if _BOT_PATTERN.search(user_agent):
        device = "robot"
    elif _TABLET_PATTERN.search(user_agent):
        device = "tablet"
    elif _MOBILE_PATTERN.search(user_agent):
        device = "phone"
    else:
        device = "desktop"

    return browser, platform, device


def get_device_info(request: Request) -> DeviceInfo:
    user_agent = request.headers.get("user-agent")
    browser, platform, device = parse_user_agent(user_agent)
    ip_address = get_client_ip(request)

    logger.debug(f"Device info: ip={ip_address}, browser={browser}, platform={platform}, device={device}")

    return DeviceInfo(ip_address=ip_address, browser=browser, platform=platform, device=device)
