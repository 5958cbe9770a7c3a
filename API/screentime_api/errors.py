class ServiceError(Exception):
    status_code = 400
    default_message = "Request could not be processed"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self):
        return {"error": self.message}


class ValidationError(ServiceError):
    status_code = 400
    default_message = "Invalid input"


class AuthError(ServiceError):
    status_code = 401
    default_message = "Unauthorized"


class PasswordRequiredError(AuthError):
    default_message = "Password required. Please create a password."

    def to_dict(self):
        data = super().to_dict()
        data['requires_password_creation'] = True
        return data


class PermissionDenied(ServiceError):
    status_code = 403
    default_message = "Permission denied"


class NotFoundError(ServiceError):
    status_code = 404
    default_message = "Not found"


class ConflictError(ServiceError):
    status_code = 409
    default_message = "Conflict"
