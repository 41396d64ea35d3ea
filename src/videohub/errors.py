class VideoHubError(Exception):
    """Base class for every failure the service reports to its caller."""

    status_code: int = 400
    message: str = "request failed"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)

    @property
    def kind(self) -> str:
        return type(self).__name__


class UserAlreadyExists(VideoHubError):
    status_code = 409
    message = "user already exists"


class NoSuchUser(VideoHubError):
    status_code = 404
    message = "no such user"


class WrongPassword(VideoHubError):
    status_code = 401
    message = "wrong password"


class NotAuthorized(VideoHubError):
    status_code = 401
    message = "not authorized"


class NoSuchVideo(VideoHubError):
    status_code = 404
    message = "no such video"


class NoSuchComment(VideoHubError):
    status_code = 404
    message = "no such comment"


class IdSpaceExhausted(VideoHubError):
    status_code = 503
    message = "could not allocate a unique identifier"
