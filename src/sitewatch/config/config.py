import os

# Compiled-in list of monitored sites.
DEFAULT_SITES = (
    "https://google.com",
    "https://youtube.com",
    "https://facebook.com",
    "https://wikipedia.org",
    "https://qq.com",
    "https://taobao.com",
    "https://yahoo.com",
    "https://tmall.com",
    "https://amazon.com",
    "https://google.co.in",
    "https://twitter.com",
    "https://sohu.com",
    "https://jd.com",
    "https://live.com",
    "https://instagram.com",
    "https://sina.com.cn",
    "https://weibo.com",
    "https://google.co.jp",
    "https://reddit.com",
    "https://vk.com",
    "https://login.tmall.com",
    "https://blogspot.com",
    "https://yandex.ru",
    "https://netflix.com",
)


def _env_bool(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None or value.strip() == "":
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_optional_float(name: str, default: float) -> float | None:
    value = os.environ.get(name)
    if value is None:
        return default
    value = value.strip()
    # Empty or zero means "use the HTTP client's own default timeout"
    if value == "" or float(value) <= 0:
        return None
    return float(value)


class Config:
    """
    Configuration class for environment variables and default settings.
    """

    HOST = os.environ.get("SITEWATCH_HOST", "0.0.0.0")
    PORT = int(os.environ.get("SITEWATCH_PORT", "8080"))

    PROBE_INTERVAL_SECONDS = float(os.environ.get("SITEWATCH_PROBE_INTERVAL", "60"))
    PROBE_CONCURRENCY = int(
        os.environ.get("SITEWATCH_PROBE_CONCURRENCY", str(os.cpu_count() or 1))
    )
    PROBE_TIMEOUT_SECONDS = _env_optional_float("SITEWATCH_PROBE_TIMEOUT", 10.0)
    # The reference service waited a full interval before its first pass
    PROBE_ON_STARTUP = _env_bool("SITEWATCH_PROBE_ON_STARTUP", True)

    SITES = DEFAULT_SITES
