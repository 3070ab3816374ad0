"""HTTP client for the practice backend.

Implements both the ``ContentProvider`` and the ``AccessGate`` protocols on
top of the backend's REST API. Every response is wrapped in an
``{success, data, message, error}`` envelope; failures are translated into
the typed errors from ``practice_app.core.errors``. The client never
retries on its own.
"""

from __future__ import annotations

import logging
from typing import Any, Sequence

import httpx
from pydantic import BaseModel, ValidationError

from practice_app.client.schemas import (
    AnswerPayload,
    ApiEnvelope,
    AttemptPayload,
    AuthPayload,
    CreateAttemptRequest,
    LoginRequest,
    QuizPayload,
    RegisterRequest,
    UpdateAttemptRequest,
    UserPayload,
)
from practice_app.constants.network_constants import DEFAULT_API_BASE_URL, REQUEST_TIMEOUT_SECONDS
from practice_app.core.errors import (
    CreationError,
    FetchError,
    NotFoundError,
    PracticeError,
    RegistrationError,
    SaveError,
    SubmitError,
    Unauthenticated,
)
from practice_app.core.models import (
    AnswerSlot,
    AttemptId,
    AttemptResult,
    QuizDefinition,
    QuizId,
    QuizSummary,
    Skill,
    SubscriptionSnapshot,
)

logger = logging.getLogger(__name__)


class PracticeApiClient:
    """Synchronous client for the quiz, attempt and auth endpoints."""

    def __init__(
        self,
        base_url: str = DEFAULT_API_BASE_URL,
        token: str | None = None,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._client = httpx.Client(
            base_url=base_url,
            timeout=timeout,
            transport=transport,
            headers={"Content-Type": "application/json"},
        )
        self._token = token

    def __enter__(self) -> PracticeApiClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    @property
    def is_authenticated(self) -> bool:
        return bool(self._token)

    # --- Auth / access gate ---

    def login(self, username: str, password: str) -> SubscriptionSnapshot:
        """Exchange credentials for a token and return the user's subscription."""
        try:
            body = LoginRequest(username=username.strip(), password=password)
        except ValidationError as exc:
            raise Unauthenticated("Username and password are required.") from exc
        data = self._request("POST", "/auth/login", Unauthenticated, json=body)
        auth = self._parse(AuthPayload, data, Unauthenticated)
        self._token = auth.token
        logger.info("Logged in as %s", auth.user.username)
        return auth.user.to_snapshot()

    def register(self, email: str, username: str, password: str, confirm_password: str) -> SubscriptionSnapshot:
        """Create an account, keep its token and return the new user's subscription."""
        try:
            body = RegisterRequest(
                email=email.strip(),
                username=username.strip(),
                password=password,
                confirmPassword=confirm_password,
            )
        except ValidationError as exc:
            raise RegistrationError(self._validation_message(exc)) from exc
        data = self._request("POST", "/auth/register", RegistrationError, json=body)
        auth = self._parse(AuthPayload, data, RegistrationError)
        self._token = auth.token
        logger.info("Registered %s", auth.user.username)
        return auth.user.to_snapshot()

    def logout(self) -> None:
        if not self._token:
            return
        try:
            self._request("POST", "/auth/logout", Unauthenticated)
        finally:
            self._token = None

    def get_current_user(self) -> SubscriptionSnapshot:
        if not self._token:
            raise Unauthenticated("Not logged in.")
        data = self._request("GET", "/auth/profile", FetchError, auth_call=True)
        return self._parse(UserPayload, data, FetchError).to_snapshot()

    # --- Content provider ---

    def list_quizzes(self, skill: Skill | None = None, part: int | None = None) -> list[QuizSummary]:
        params: dict[str, str] = {}
        if skill is not None:
            params["skill"] = skill.value
        if part:
            params["part"] = str(part)
        data = self._request("GET", "/quizzes", FetchError, params=params)
        if not isinstance(data, list):
            raise FetchError("Expected a list of quizzes from the server.")
        return [self._parse(QuizPayload, item, FetchError).to_summary() for item in data]

    def fetch_quiz_definition(self, quiz_id: QuizId) -> QuizDefinition:
        data = self._request("GET", f"/quizzes/{quiz_id}", FetchError)
        return self._parse(QuizPayload, data, FetchError).to_definition()

    def create_attempt(self, quiz_id: QuizId) -> AttemptId:
        body = CreateAttemptRequest(quizId=str(quiz_id))
        data = self._request("POST", "/quiz-attempts", CreationError, json=body)
        return AttemptId(self._parse(AttemptPayload, data, CreationError).id)

    def update_attempt(self, attempt_id: AttemptId, answers: Sequence[AnswerSlot]) -> AttemptResult:
        body = UpdateAttemptRequest(answers=[AnswerPayload.from_slot(slot) for slot in answers])
        data = self._request("PUT", f"/quiz-attempts/{attempt_id}", SaveError, json=body)
        return self._parse(AttemptPayload, data, SaveError).to_result()

    def finalize_attempt(self, attempt_id: AttemptId) -> AttemptResult:
        data = self._request("POST", f"/quiz-attempts/{attempt_id}/submit", SubmitError)
        return self._parse(AttemptPayload, data, SubmitError).to_result()

    def fetch_attempt(self, attempt_id: AttemptId) -> AttemptResult:
        data = self._request("GET", f"/quiz-attempts/{attempt_id}", FetchError)
        return self._parse(AttemptPayload, data, FetchError).to_result()

    # --- Transport helpers ---

    def _request(
        self,
        method: str,
        path: str,
        error_cls: type[PracticeError],
        *,
        json: BaseModel | None = None,
        params: dict[str, str] | None = None,
        auth_call: bool = False,
    ) -> Any:
        headers = {"Authorization": f"Bearer {self._token}"} if self._token else {}
        try:
            response = self._client.request(
                method,
                path,
                json=json.model_dump() if json is not None else None,
                params=params,
                headers=headers,
            )
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed: %s", method, path, exc)
            raise error_cls(f"Could not reach the practice server: {exc}") from exc

        if response.status_code == httpx.codes.UNAUTHORIZED and (auth_call or error_cls is Unauthenticated):
            self._token = None
            raise Unauthenticated(self._error_message(response, "Your session has expired. Please log in again."))
        if response.status_code == httpx.codes.NOT_FOUND and issubclass(error_cls, FetchError):
            raise NotFoundError(self._error_message(response, f"Nothing found at {path}."))
        if response.is_error:
            logger.warning("%s %s returned %s", method, path, response.status_code)
            raise error_cls(self._error_message(response, f"Server responded with {response.status_code}."))

        try:
            envelope = ApiEnvelope.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise error_cls("The server sent a malformed response.") from exc
        if not envelope.success:
            raise error_cls(envelope.error or envelope.message or "The request was not successful.")
        return envelope.data

    @staticmethod
    def _parse(model: type[BaseModel], data: Any, error_cls: type[PracticeError]) -> Any:
        try:
            return model.model_validate(data)
        except ValidationError as exc:
            raise error_cls(f"Unexpected {model.__name__} payload: {exc.error_count()} invalid field(s).") from exc

    @staticmethod
    def _error_message(response: httpx.Response, fallback: str) -> str:
        try:
            payload = response.json()
        except ValueError:
            return fallback
        if isinstance(payload, dict):
            message = payload.get("error") or payload.get("message")
            if isinstance(message, str) and message:
                return message
        return fallback

    @staticmethod
    def _validation_message(exc: ValidationError) -> str:
        first = exc.errors()[0]
        field = ".".join(str(part) for part in first["loc"])
        message = first["msg"].removeprefix("Value error, ")
        return f"{field}: {message}" if field else message
