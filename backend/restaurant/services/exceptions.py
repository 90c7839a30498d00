class ServiceException(Exception):
    """Base for errors raised by the service layer. `message` is safe to show to users."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ServiceException):
    pass


class EmptyCartError(ServiceException):
    def __init__(self, message: str = "Cart is empty. Please add items first."):
        super().__init__(message)


class NotFoundError(ServiceException):
    pass


class NotAuthenticatedError(ServiceException):
    def __init__(self, message: str = "User not logged in"):
        super().__init__(message)


class ForbiddenError(ServiceException):
    def __init__(self, message: str = "Not allowed"):
        super().__init__(message)


class PersistenceError(ServiceException):
    pass
