"""测试公共工具：基于 httpx.MockTransport 的假 iCloud 服务"""

import json
from typing import Callable, Union

import httpx
import pytest

from icloud_hme.config import HMEConfig
from icloud_hme.cookies import Cookie
from icloud_hme.headers import build_session_headers
from icloud_hme.session import ICloudSession
from icloud_hme.transport import HttpxTransport

VALIDATE_URL = "https://setup.icloud.com/setup/ws/1/validate"
HME_BASE = "https://p68-maildomainws.icloud.com"
GENERATE_URL = f"{HME_BASE}/v1/hme/generate"
RESERVE_URL = f"{HME_BASE}/v1/hme/reserve"
LIST_URL = f"{HME_BASE}/v2/hme/list"

Route = Union[httpx.Response, Callable[[httpx.Request], httpx.Response]]


class FakeICloud:
    """按 (method, url) 返回预设响应，并记录收到的请求"""

    def __init__(self):
        self.routes: dict[tuple[str, str], Route] = {}
        self.requests: list[httpx.Request] = []

    def add(self, method: str, url: str, route: Route) -> None:
        self.routes[(method, url)] = route

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get((request.method, str(request.url)))
        if route is None:
            return httpx.Response(404, text=f"no route for {request.method} {request.url}")
        if callable(route):
            return route(request)
        return route

    def requests_to(self, url: str) -> list[httpx.Request]:
        return [r for r in self.requests if str(r.url) == url]

    def make_session(self, cookies=None) -> ICloudSession:
        if cookies is None:
            cookies = [Cookie(name="X-APPLE-WEBAUTH-USER", value="u1"),
                       Cookie(name="X-APPLE-WEBAUTH-TOKEN", value="t1")]
        config = HMEConfig()
        transport = HttpxTransport(
            headers=build_session_headers(config.user_agent),
            timeout=config.timeout,
            transport=httpx.MockTransport(self.handler),
        )
        return ICloudSession(cookies, config=config, transport=transport)


def webservices_body(status="active", url=HME_BASE, include_status=True, include_service=True):
    services = {
        "mail": {"url": "https://p68-mailws.icloud.com", "status": "active"},
        "contacts": {"url": "https://p68-contactsws.icloud.com"},
    }
    if include_service:
        hme = {"url": url}
        if include_status:
            hme["status"] = status
        services["premiummailsettings"] = hme
    return {"dsInfo": {"dsid": "123"}, "webservices": services}


def reserve_record(hme="x@example.com", is_active=True, label="L", note="N"):
    return {
        "origin": "ON_DEMAND",
        "anonymousId": "abc123",
        "domain": "",
        "hme": hme,
        "label": label,
        "note": note,
        "createTimestamp": 1700000000000,
        "isActive": is_active,
        "recipientMailId": "",
    }


def envelope(result):
    return {"success": True, "timestamp": 1700000000, "result": result}


def json_response(body, status=200, headers=None) -> httpx.Response:
    return httpx.Response(status, content=json.dumps(body).encode(), headers={
        "Content-Type": "application/json", **(headers or {})
    })


@pytest.fixture
def icloud() -> FakeICloud:
    """已配置 validate 成功的假 iCloud"""
    fake = FakeICloud()
    fake.add("POST", VALIDATE_URL, json_response(webservices_body()))
    return fake
