"""
Best-effort device description from a User-Agent header.

Used when a client submits without reporting its own environment.
"""
import re
from typing import Optional

from app.models.workflow.submission import DeviceInfo

UNKNOWN = "unknown"

# Order matters: Edge and Opera also advertise Chrome, Chrome also advertises Safari
_BROWSER_PATTERNS = [
    ("Edge", re.compile(r"Edg(?:e|A|iOS)?/(\d+\.\d+)")),
    ("Opera", re.compile(r"(?:OPR|Opera)/(\d+\.\d+)")),
    ("Chrome", re.compile(r"(?:Chrome|CriOS)/(\d+\.\d+)")),
    ("Firefox", re.compile(r"(?:Firefox|FxiOS)/(\d+\.\d+)")),
    ("Safari", re.compile(r"Version/(\d+\.\d+).*Safari")),
    ("Internet Explorer", re.compile(r"(?:MSIE |Trident/.*rv:)(\d+\.\d+)")),
]

_OS_PATTERNS = [
    ("Windows", re.compile(r"Windows NT")),
    ("iOS", re.compile(r"iPhone|iPad|iPod")),
    ("Android", re.compile(r"Android")),
    ("macOS", re.compile(r"Mac OS X|Macintosh")),
    ("Linux", re.compile(r"Linux")),
]


def parse_browser(user_agent: str) -> str:
    for name, pattern in _BROWSER_PATTERNS:
        if pattern.search(user_agent):
            return name
    return UNKNOWN


def parse_os(user_agent: str) -> str:
    for name, pattern in _OS_PATTERNS:
        if pattern.search(user_agent):
            return name
    return UNKNOWN


def parse_device(user_agent: str) -> str:
    if re.search(r"iPad|Tablet|Android(?!.*Mobile)", user_agent):
        return "Tablet"
    if re.search(r"Mobi|iPhone|iPod|Android.*Mobile", user_agent):
        return "Mobile"
    return "Desktop"


def device_info_from_user_agent(user_agent: Optional[str]) -> DeviceInfo:
    if not user_agent:
        return DeviceInfo(browser=UNKNOWN, os=UNKNOWN, device=UNKNOWN)
    return DeviceInfo(
        browser=parse_browser(user_agent),
        os=parse_os(user_agent),
        device=parse_device(user_agent)
    )
