# survey_api/core/errors.py

from fastapi import status


class SurveyEngineError(Exception):
    # Base class for per-request failures of the scoring and advice core.
    kind = "SurveyEngineError"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"detail": self.message, "kind": self.kind}


class TemplateNotFound(SurveyEngineError):
    # Raised when no active template has the requested code.
    kind = "NotFound"
    status_code = status.HTTP_404_NOT_FOUND


class AnswerValidationError(SurveyEngineError):
    # Raised when an answer breaks the type, range or required constraint of its question.
    kind = "ValidationError"
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY

    def __init__(self, message: str, question_id: str = None):
        super().__init__(message)
        self.question_id = question_id

    def to_dict(self) -> dict:
        payload = super().to_dict()
        if self.question_id is not None:
            payload["question_id"] = self.question_id
        return payload


class UnknownQuestion(SurveyEngineError):
    # Raised when a normalized answer set names a question the template does not define.
    kind = "UnknownQuestion"
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY


class ScoringRuleMissing(SurveyEngineError):
    # Raised when a template question has no resolvable weight or rule.
    kind = "ScoringRuleMissing"


class NoBandMatch(SurveyEngineError):
    # Raised when no interpretation band of the template contains the score.
    kind = "NoBandMatch"


class AdviceUnavailable(SurveyEngineError):
    # Raised when the generative-advice subsystem fails, times out or answers empty.
    kind = "AdviceUnavailable"
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
