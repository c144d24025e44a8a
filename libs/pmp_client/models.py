"""Typed response shapes for the vault REST endpoints.

Every PMP response wraps its payload in an ``operation`` envelope:

    {"operation": {"name": "...", "result": {"status": "Success", "message": "..."},
                   "Details": ...}}

Per-item fields are optional so that one incomplete resource or account is
skipped rather than failing the whole listing. A body without the envelope
(including the empty object returned for a failed call) is a parse error.
"""

from __future__ import annotations

from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from libs.pmp_client.exceptions import ResponseParseError

SUCCESS_STATUS = "Success"


class _PMPModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore", coerce_numbers_to_str=True)


class OperationResult(_PMPModel):
    status: str | None = None
    message: str | None = None

    @property
    def is_success(self) -> bool:
        return self.status is None or self.status.lower() == SUCCESS_STATUS.lower()


class ResourceSummary(_PMPModel):
    resource_id: str | None = Field(default=None, alias="RESOURCE ID")
    resource_name: str | None = Field(default=None, alias="RESOURCE NAME")
    resource_type: str | None = Field(default=None, alias="RESOURCE TYPE")


class AccountSummary(_PMPModel):
    account_id: str | None = Field(default=None, alias="ACCOUNT ID")
    account_name: str | None = Field(default=None, alias="ACCOUNT NAME")


class AccountListDetails(_PMPModel):
    resource_id: str | None = Field(default=None, alias="RESOURCE ID")
    resource_name: str | None = Field(default=None, alias="RESOURCE NAME")
    accounts: list[AccountSummary] | None = Field(default=None, alias="ACCOUNT LIST")


class PasswordDetails(_PMPModel):
    password: str | None = Field(default=None, alias="PASSWORD")


class ResourceListOperation(_PMPModel):
    result: OperationResult | None = None
    details: list[ResourceSummary] | None = Field(default=None, alias="Details")


class AccountListOperation(_PMPModel):
    result: OperationResult | None = None
    details: AccountListDetails | None = Field(default=None, alias="Details")


class PasswordOperation(_PMPModel):
    result: OperationResult | None = None
    details: PasswordDetails | None = Field(default=None, alias="Details")


class ResourceListResponse(_PMPModel):
    """GET /resources"""

    operation: ResourceListOperation

    @property
    def resources(self) -> list[ResourceSummary]:
        return self.operation.details or []


class AccountListResponse(_PMPModel):
    """GET /resources/{groupId}/accounts"""

    operation: AccountListOperation

    @property
    def accounts(self) -> list[AccountSummary]:
        details = self.operation.details
        if details is None or details.accounts is None:
            return []
        return details.accounts


class PasswordResponse(_PMPModel):
    """GET /resources/{groupId}/accounts/{accountId}/password"""

    operation: PasswordOperation

    @property
    def password(self) -> str | None:
        details = self.operation.details
        return details.password if details is not None else None


ResponseT = TypeVar("ResponseT", ResourceListResponse, AccountListResponse, PasswordResponse)


def parse_response(model: type[ResponseT], payload: dict[str, Any], endpoint: str) -> ResponseT:
    """
    Validate an endpoint payload against its response model.

    Raises:
        ResponseParseError: If the payload does not match the model.
    """
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        errors = [
            f"{'.'.join(str(part) for part in item['loc']) or '<body>'}: {item['msg']}"
            for item in e.errors()
        ]
        raise ResponseParseError(endpoint=endpoint, errors=errors) from e
