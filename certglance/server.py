import base64
import logging
from pathlib import Path
from typing import Annotated

from fastmcp import FastMCP
from pydantic import Field

from .loader import load_x509
from .logging_conf import setup_logging
from .mcp_contracts import (
    CertificateSummaryModel,
    RequestSummaryModel,
    ShortTextResult,
)
from .path_utils import input_path
from .settings import Settings
from .shortform import CertificateSummary, summarize

log = logging.getLogger(__name__)

mcp = FastMCP(
    name="CertGlance",
    instructions=(
        "Purpose: render a compact, human-readable summary of an X.509 certificate or CSR. "
        "No network access, no file writes.\n\n"
        "Use me when: you need a short description of a certificate's role (root CA, intermediate CA, TLS), "
        "public key, serial, subject and SANs, issuer, provisioner and validity window.\n"
        "Do NOT use me for: chain/revocation validation, policy checks, or conversions.\n\n"
        "How to call:\n"
        "- Local file → `short_text_from_local_path(path=...)`.\n"
        "- Base64 file → `short_text_from_b64(filename=..., content_b64=...)`.\n"
        "  `content_b64` MUST be RFC 4648 raw base64 of the file bytes (no data: URI, no whitespace/newlines).\n\n"
        "Inputs: PEM or DER, certificate or certificate signing request. "
        "The first certificate found wins; a CSR is used only when no certificate is present.\n\n"
        "Outputs (both tools): a JSON object with `kind` (`certificate` or `csr`), the rendered `text`, "
        "and the structured `summary`.\n\n"
        "Safety: read-only and idempotent."
    ),
)


def _short_text_from_bytes(name_key: str, name_val: str, data: bytes) -> dict:
    obj = load_x509(data)
    summary = summarize(obj)
    if isinstance(summary, CertificateSummary):
        result = ShortTextResult(
            kind="certificate",
            text=str(summary),
            summary=CertificateSummaryModel(**summary.as_dict()),
        )
    else:
        result = ShortTextResult(
            kind="csr",
            text=str(summary),
            summary=RequestSummaryModel(**summary.as_dict()),
        )
    log.info(
        "summarized %s", result.kind,
        extra={"source": name_val, "kind": result.kind, "subject": summary.subject},
    )
    return {name_key: name_val, **result.model_dump(mode="json")}


@mcp.tool(
    description="Health check. Returns 'pong'.",
    tags={"certglance"},
    annotations={"title": "Ping", "readOnlyHint": True, "idempotentHint": True},
)
def ping() -> str:
    return "pong"


@mcp.tool(
    description=(
        "Summarize a local certificate or CSR file (PEM or DER) as short text. "
        "Read-only and idempotent."
    ),
    tags={"certglance", "x509", "filesystem"},
    annotations={
        "title": "Summarize local file",
        "readOnlyHint": True,
        "idempotentHint": True,
        "openWorldHint": False,
    },
)
def short_text_from_local_path(
    path: Annotated[
        Path,
        Field(description="Local path to the certificate or CSR."),
    ],
) -> dict:
    """
    Example:
      { "path": "/tmp/certs/server.pem" }
    """
    p = input_path(path)
    return _short_text_from_bytes("path", str(p), p.read_bytes())


@mcp.tool(
    description=(
        "Summarize a certificate or CSR provided as base64 (PEM or DER bytes). "
        "Use this when the client cannot expose a local path. Read-only and idempotent."
    ),
    tags={"certglance", "x509", "binary"},
    annotations={
        "title": "Summarize base64 content",
        "readOnlyHint": True,
        "idempotentHint": True,
        "openWorldHint": False,
    },
)
def short_text_from_b64(
    filename: Annotated[
        str,
        Field(description="Original filename (informational only, never read from disk)."),
    ],
    content_b64: Annotated[
        str,
        Field(description="RFC 4648 raw base64-encoded bytes of the file"),
    ],
) -> dict:
    data = base64.b64decode(content_b64, validate=True)
    return _short_text_from_bytes("filename", filename, data)


@mcp.prompt(
    name="explain_short_text",
    description="Turn a CertGlance short text summary into a plain-language explanation.",
    tags={"certglance", "prompt", "explain"},
)
def explain_short_text(
    short_text: Annotated[
        str, Field(description="The `text` field returned by a CertGlance tool.")
    ],
) -> str:
    return (
        "Given this certificate summary, explain it to a non-expert:\n"
        f"{short_text}\n"
        "Explain: whether it is a root CA, intermediate CA or end-entity (TLS) certificate; "
        "the key algorithm and size; the names it covers; who issued it; and its validity window. "
        "Flag keys that look weak (RSA < 2048). Keep it under 120 words."
    )


def main() -> None:
    setup_logging(Settings.from_env())
    mcp.run()


if __name__ == "__main__":
    main()
