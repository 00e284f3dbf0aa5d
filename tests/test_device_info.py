import pytest

from app.utils.device_info import device_info_from_user_agent

CHROME_WINDOWS = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)
EDGE_WINDOWS = CHROME_WINDOWS + " Edg/120.0.2210.91"
SAFARI_IPHONE = (
    "Mozilla/5.0 (iPhone; CPU iPhone OS 17_1 like Mac OS X) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/17.1 Mobile/15E148 Safari/604.1"
)
CHROME_ANDROID = (
    "Mozilla/5.0 (Linux; Android 14; Pixel 8) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Mobile Safari/537.36"
)
FIREFOX_LINUX = "Mozilla/5.0 (X11; Ubuntu; Linux x86_64; rv:121.0) Gecko/20100101 Firefox/121.0"
SAFARI_IPAD = (
    "Mozilla/5.0 (iPad; CPU OS 17_1 like Mac OS X) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/17.1 Mobile/15E148 Safari/604.1"
)


@pytest.mark.parametrize("user_agent, expected", [
    (CHROME_WINDOWS, ("Chrome", "Windows", "Desktop")),
    (EDGE_WINDOWS, ("Edge", "Windows", "Desktop")),
    (SAFARI_IPHONE, ("Safari", "iOS", "Mobile")),
    (CHROME_ANDROID, ("Chrome", "Android", "Mobile")),
    (FIREFOX_LINUX, ("Firefox", "Linux", "Desktop")),
    (SAFARI_IPAD, ("Safari", "iOS", "Tablet")),
])
def test_user_agent_parsing(user_agent, expected):
    info = device_info_from_user_agent(user_agent)
    assert (info.browser, info.os, info.device) == expected


@pytest.mark.parametrize("user_agent", [None, ""])
def test_missing_user_agent(user_agent):
    info = device_info_from_user_agent(user_agent)
    assert (info.browser, info.os, info.device) == ("unknown", "unknown", "unknown")
    assert info.screen_size is None
