"""DRCサーバーへのHTTPアクセスを共有トークンで制限するミドルウェア。"""

import logging
import secrets

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp

logger = logging.getLogger(__name__)

_BEARER_PREFIX = "bearer "


def request_token(request: Request) -> str:
    """リクエストからトークンを取り出す。クエリの ``token`` を優先し、
    無ければ ``Authorization: Bearer`` ヘッダーを見る。"""
    token = request.query_params.get("token")
    if token:
        return token
    header = request.headers.get("authorization", "")
    if header.lower().startswith(_BEARER_PREFIX):
        return header[len(_BEARER_PREFIX) :].strip()
    return ""


class TokenAuthMiddleware(BaseHTTPMiddleware):
    """SOCDRC_URL_TOKEN が空でなければ、一致するトークンを持たないリクエストを401で拒否する。

    ``open_paths`` に含まれるパスは検証しない（既定は /health）。
    """

    def __init__(self, app: ASGIApp, url_token: str = "", open_paths: frozenset[str] = frozenset({"/health"})) -> None:
        super().__init__(app)
        self._token = url_token
        self._open_paths = open_paths

    def _authorized(self, request: Request) -> bool:
        if not self._token or request.url.path in self._open_paths:
            return True
        return secrets.compare_digest(request_token(request).encode(), self._token.encode())

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if self._authorized(request):
            return await call_next(request)
        logger.warning("Rejected unauthenticated request: %s %s", request.method, request.url.path)
        return JSONResponse(
            {"error": "Unauthorized", "message": "Invalid or missing token"},
            status_code=401,
        )
