"""iCloud / Hide My Email 接口的请求与响应模型

字段使用 snake_case，序列化/反序列化时使用接口的 camelCase 别名。
每个接口都有独立的响应类型，不依赖 result.hme 的形状来判断来源。
"""

from typing import Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import DecodeError

ModelT = TypeVar("ModelT", bound=BaseModel)


class _WireModel(BaseModel):
    """按别名解析，也允许用字段名构造"""

    model_config = ConfigDict(populate_by_name=True)


class Service(BaseModel):
    """webservices 中的单个服务"""

    url: Optional[str] = None
    status: Optional[str] = None


class ValidateResponse(BaseModel):
    """POST /setup/ws/1/validate"""

    webservices: dict[str, Service]


class HMEReserveResult(_WireModel):
    """已保留（激活）的 Hide My Email 地址"""

    origin: str
    anonymous_id: str = Field(alias="anonymousId")
    domain: str
    hme: str
    label: str
    note: str
    create_timestamp: int = Field(alias="createTimestamp")
    is_active: bool = Field(alias="isActive")
    recipient_mail_id: str = Field(alias="recipientMailId")


class HMEListEmail(HMEReserveResult):
    """list 接口中的地址记录，多一个转发目标"""

    forward_to_email: str = Field(alias="forwardToEmail")


class HMEListResult(_WireModel):
    forward_to_emails: list[str] = Field(alias="forwardToEmails")
    hme_emails: list[HMEListEmail] = Field(alias="hmeEmails")
    selected_forward_to: str = Field(alias="selectedForwardTo")

    def find_by_label(self, label: str) -> list[HMEListEmail]:
        """返回 label 完全匹配的地址"""
        return [e for e in self.hme_emails if e.label == label]


class GenerateResult(BaseModel):
    hme: str


class ReserveResult(BaseModel):
    hme: HMEReserveResult


class _Envelope(BaseModel):
    success: bool
    timestamp: int


class GenerateResponse(_Envelope):
    """POST {base}/v1/hme/generate"""

    result: GenerateResult


class ReserveResponse(_Envelope):
    """POST {base}/v1/hme/reserve"""

    result: ReserveResult


class ListResponse(_Envelope):
    """GET {base}/v2/hme/list"""

    result: HMEListResult


class ClaimPayload(BaseModel):
    """reserve 请求体"""

    hme: str
    label: str
    note: str


def decode_response(model: Type[ModelT], text: str) -> ModelT:
    """
    将响应体解析为指定模型

    Raises:
        DecodeError: 不是合法 JSON，或结构与模型不符
    """
    try:
        return model.model_validate_json(text)
    except ValidationError as e:
        raise DecodeError(f"Unexpected {model.__name__} body: {e}") from e
