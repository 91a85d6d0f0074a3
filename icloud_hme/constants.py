"""iCloud 端点与浏览器特征常量"""

ICLOUD_ORIGIN = "https://www.icloud.com"
ICLOUD_REFERER = "https://www.icloud.com/"
ACCEPT = "*/*"

# 与 Chrome 121 (Windows 10) 一致，iCloud 会拒绝明显非浏览器的 UA
BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/121.0.0.0 Safari/537.36"
)

# curl_cffi 后端的 TLS 指纹
DEFAULT_IMPERSONATE = "chrome120"

SETUP_URL = "https://setup.icloud.com/setup/ws/1"

# validate 返回的 webservices 中 Hide My Email 服务的键名
HME_SERVICE_KEY = "premiummailsettings"
HME_ACTIVE_STATUS = "active"

# 相对于 premiummailsettings.url
HME_GENERATE_PATH = "/v1/hme/generate"
HME_RESERVE_PATH = "/v1/hme/reserve"
HME_LIST_PATH = "/v2/hme/list"

DEFAULT_TIMEOUT = 30.0
