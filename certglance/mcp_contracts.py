# certglance/mcp_contracts.py
from __future__ import annotations
from typing import List, Literal, Optional, Union
from pydantic import BaseModel, Field


class ProvisionerModel(BaseModel):
    id: str = Field(..., examples=["a1b2...c3d4"])
    name: str = Field(..., examples=["admin@example.com"])


class CertificateSummaryModel(BaseModel):
    type: Literal["Root CA", "Intermediate CA", "TLS"]
    public_key_algorithm: str = Field(..., examples=["ECDSA P-256", "RSA 2048"])
    serial: str
    subject: str
    issuer: str
    sans: List[str] = []
    provisioner: Optional[ProvisionerModel] = None
    not_before: str
    not_after: str


class RequestSummaryModel(BaseModel):
    public_key_algorithm: str
    subject: str
    sans: List[str] = []


class ShortTextResult(BaseModel):
    kind: Literal["certificate", "csr"]
    text: str
    summary: Union[CertificateSummaryModel, RequestSummaryModel]
