"""Pydantic schemas for gee-connect payloads."""

from __future__ import annotations

from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field


def _to_camel(value: str) -> str:
    parts = value.split("_")
    return parts[0] + "".join(part.capitalize() for part in parts[1:])


class CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, alias_generator=_to_camel)


class AuthStatus(CamelModel):
    mode: Literal["none", "service_account", "default", "explicit"] = "none"
    project: Optional[str] = None
    account: Optional[str] = None
    initialized: bool = False


class ImageSummary(CamelModel):
    id: str
    band_ids: List[str] = Field(default_factory=list)
    property_names: List[str] = Field(default_factory=list)


class ImagePropertyResponse(CamelModel):
    asset: str
    property: str
    value: Any = None


CheckStatus = Literal["ok", "warn", "fail", "skip"]


class DiagnosticCheck(CamelModel):
    name: str
    status: CheckStatus
    detail: str = ""
    hint: Optional[str] = None


class DoctorReport(CamelModel):
    checks: List[DiagnosticCheck] = Field(default_factory=list)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def ok(self) -> bool:
        return not any(check.status == "fail" for check in self.checks)

    def add(
        self, name: str, status: CheckStatus, detail: str = "", hint: Optional[str] = None
    ) -> DiagnosticCheck:
        check = DiagnosticCheck(name=name, status=status, detail=detail, hint=hint)
        self.checks.append(check)
        return check

    def get(self, name: str) -> Optional[DiagnosticCheck]:
        for check in self.checks:
            if check.name == name:
                return check
        return None
