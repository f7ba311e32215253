"""
Request payload types.

Payloads are forwarded verbatim to the remote service, which owns their
validation. The aliases only document which endpoint a mapping is meant for.
"""
from __future__ import annotations

from typing import Any, Dict, List, Mapping, Union

Payload = Mapping[str, Any]
QueryParams = Mapping[str, Any]

PdfRequest = Payload
ScreenshotRequest = Payload
ContentRequest = Payload
ExportRequest = Payload
PerformanceRequest = Payload
UnblockRequest = Payload
BrowserQLRequest = Payload

# /function and /download also accept the raw script source
FunctionRequest = Union[str, Payload]
DownloadRequest = Union[str, Payload]

Session = Dict[str, Any]
SessionList = List[Session]
