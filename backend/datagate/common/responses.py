"""
Response Formatting Module

BaseResponse builds the success envelope {"message", "timestamps", ...data} and
raises ErrorException for the fixed set of error types.
ApiResponder adds per-request status bookkeeping and the
{"error": {"code", "http_code", "message"}} error bodies.
"""

import logging
from typing import Any, NoReturn, Optional

from fastapi import status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from datagate.common.errors import ErrorException
from datagate.common.time import unix_timestamp

logger = logging.getLogger(__name__)


class BaseResponse:
    """Uniform JSON success/error envelopes"""

    STATUS_TYPES = {
        "BAD_REQUEST": status.HTTP_400_BAD_REQUEST,
        "UNAUTHORIZED": status.HTTP_401_UNAUTHORIZED,
        "FORBIDDEN": status.HTTP_403_FORBIDDEN,
        "NOT_FOUND": status.HTTP_404_NOT_FOUND,
        "METHOD_NOT_ALLOWED": status.HTTP_405_METHOD_NOT_ALLOWED,
    }

    def format_response(
        self,
        message: str,
        code: int,
        data: Optional[dict[str, Any]] = None,
    ) -> JSONResponse:
        response = {
            "message": message,
            "timestamps": unix_timestamp(),
        }
        response.update(data or {})
        return JSONResponse(content=jsonable_encoder(response), status_code=code)

    def _throw_errors_exception(self, message: str, code: int) -> NoReturn:
        raise ErrorException(message, code)

    def response_success(
        self,
        data: Optional[dict[str, Any]] = None,
        message: str = "操作成功",
    ) -> JSONResponse:
        """
        Success envelope with HTTP 200

        Keys of data are merged into the envelope and win on collision.
        """
        return self.format_response(message, status.HTTP_200_OK, data)

    def response_error(self, error_type: str, message: str = "请求地址不存在") -> NoReturn:
        """
        Raise ErrorException for one of STATUS_TYPES

        Unknown types fall back to NOT_FOUND.
        """
        code = self.STATUS_TYPES.get(error_type, status.HTTP_404_NOT_FOUND)
        logger.info("Responding %s (%d): %s", error_type, code, message)
        self._throw_errors_exception(message, code)


class ApiResponder(BaseResponse):
    """
    API Responder

    Stateful helper; create one per request.
    """

    CODE_WRONG_ARGS = "wrong_args"
    CODE_NOT_FOUND = "not_found"
    CODE_INTERNAL_ERROR = "internal_error"
    CODE_UNAUTHORIZED = "unauthorized"
    CODE_FORBIDDEN = "forbidden"
    CODE_UNPROCESSABLE_ENTITY = "unprocessable_entity"

    def __init__(self):
        self.status = True
        self.status_code = status.HTTP_200_OK

    def set_status(self, value: bool) -> "ApiResponder":
        self.status = value
        return self

    def response_json(self, data: Any, func: str = "error") -> JSONResponse:
        return JSONResponse(
            content=jsonable_encoder({"status": self.status, "type": func, func: data})
        )

    def item_not_found(self, message: str = "指定数据未找到") -> JSONResponse:
        return self.set_status(False).response_json(message)

    def get_status_code(self) -> int:
        return self.status_code

    def set_status_code(self, status_code: int) -> "ApiResponder":
        self.status_code = status_code
        return self

    def respond_with(self, data: Any, headers: Optional[dict[str, str]] = None) -> JSONResponse:
        """
        Respond according to the type of data

        - falsy: 404 error
        - entity / page (anything with to_dict), or a list of them: item response
        - str / dict / list: array response
        - anything else: 500 error
        """
        if not data:
            return self.error_not_found("Requested response not found。")
        if hasattr(data, "to_dict") or (
            isinstance(data, list) and all(hasattr(item, "to_dict") for item in data)
        ):
            return self.respond_with_item(data, headers)
        if isinstance(data, (str, dict, list)):
            return self.respond_with_array(data, headers)
        return self.error_internal_error()

    def respond_with_item(self, item: Any, headers: Optional[dict[str, str]] = None) -> JSONResponse:
        if isinstance(item, list):
            content = [entity.to_dict() for entity in item]
        else:
            content = item.to_dict()
        return self.respond_with_array(content, headers)

    def respond_with_array(self, array: Any, headers: Optional[dict[str, str]] = None) -> JSONResponse:
        return JSONResponse(
            content=jsonable_encoder(array),
            status_code=self.status_code,
            headers=headers,
        )

    def respond_with_error(self, message: str, error_code: str) -> JSONResponse:
        return self.respond_with_array({
            "error": {
                "code": error_code,
                "http_code": self.status_code,
                "message": message,
            }
        })

    def error_forbidden(self, message: str = "Forbidden") -> JSONResponse:
        return self.set_status_code(status.HTTP_403_FORBIDDEN).respond_with_error(
            message, self.CODE_FORBIDDEN
        )

    def error_internal_error(self, message: str = "Internal Error") -> JSONResponse:
        return self.set_status_code(status.HTTP_500_INTERNAL_SERVER_ERROR).respond_with_error(
            message, self.CODE_INTERNAL_ERROR
        )

    def error_not_found(self, message: str = "Resource Not Found") -> JSONResponse:
        return self.set_status_code(status.HTTP_404_NOT_FOUND).respond_with_error(
            message, self.CODE_NOT_FOUND
        )

    def error_unauthorized(self, message: str = "Unauthorized") -> JSONResponse:
        return self.set_status_code(status.HTTP_401_UNAUTHORIZED).respond_with_error(
            message, self.CODE_UNAUTHORIZED
        )

    def error_wrong_args(self, message: str = "Wrong Arguments") -> JSONResponse:
        return self.set_status_code(status.HTTP_400_BAD_REQUEST).respond_with_error(
            message, self.CODE_WRONG_ARGS
        )

    def error_unprocessable_entity(self, message: str = "Unprocessable Entity") -> JSONResponse:
        return self.set_status_code(422).respond_with_error(
            message, self.CODE_UNPROCESSABLE_ENTITY
        )
