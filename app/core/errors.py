"""
Errores de dominio. Los servicios lanzan estos; app/main.py los traduce
a status code + {"success": false, "error": {"kind", "detail"}}.
"""


class AppError(Exception):
    status_code = 500
    kind = "unexpected"

    def __init__(self, detail: str = ""):
        super().__init__(detail)
        self.detail = detail or self.__class__.__name__


class ValidationFailed(AppError):
    status_code = 400
    kind = "validation"


class Unauthorized(AppError):
    status_code = 401
    kind = "unauthorized"


class Forbidden(AppError):
    status_code = 403
    kind = "forbidden"


class NotFound(AppError):
    status_code = 404
    kind = "not_found"


class StoreUnavailable(AppError):
    status_code = 503
    kind = "store_unavailable"
