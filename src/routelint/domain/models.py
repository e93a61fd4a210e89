from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

SeverityName = Literal["warning", "mandatory-warning", "error"]


class DiagnosticRecord(BaseModel):
    severity: SeverityName
    kind: str
    message: str
    file_path: str = ""
    line: int = 0
    declaration: str = ""  # e.g. UserController.get


class RouteRecord(BaseModel):
    verb: str
    path: str
    handler_name: str = ""
    file_path: str = ""
    line: int = 0


class CheckReport(BaseModel):
    root: str
    files_scanned: int = 0
    failures: int = 0
    diagnostics: list[DiagnosticRecord] = Field(default_factory=list)
    routes: list[RouteRecord] = Field(default_factory=list)
