from typing import Any, Dict, Optional


class AudioExtractorError(Exception):
    status_code = 500

    def __init__(self, error: str, message: Optional[str] = None):
        super().__init__(message or error)
        self.error = error
        self.message = message

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"error": self.error}
        if self.message is not None:
            body["message"] = self.message
        return body


class ClientInputError(AudioExtractorError):
    status_code = 400


class NotFoundError(AudioExtractorError):
    status_code = 404


class ExtractionFailure(AudioExtractorError):
    status_code = 500


class BackendUnavailable(AudioExtractorError):
    status_code = 503
