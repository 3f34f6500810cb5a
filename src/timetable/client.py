"""ClassCharts student API client.

Implements the two calls the converter needs from ClassCharts: a student
login (code + optional date of birth) and a per-day timetable fetch. Any
object with the same login()/get_lessons() pair can stand in for the client,
see LessonSource.
"""

import json
from typing import Protocol
from urllib.parse import unquote

import requests

from src.timetable.errors import AuthenticationError, DayFetchError
from src.timetable.logging import get_logger
from src.timetable.models import Lesson

logger = get_logger(__name__)

API_PATH = "/apiv2student"
SESSION_COOKIE = "student_session_credentials"


class LessonSource(Protocol):
    """Anything that can log in and list a day's lessons."""

    def login(self) -> None: ...

    def get_lessons(self, date: str) -> list[Lesson]: ...


class ClassChartsClient:
    """Authenticated session against the ClassCharts student API."""

    def __init__(
        self,
        code: str,
        date_of_birth: str | None = None,
        *,
        base_url: str = "https://www.classcharts.com",
        timeout: float = 30.0,
        session: requests.Session | None = None,
    ) -> None:
        """Initialize the client. No request is made until login().

        Args:
            code: ClassCharts student code.
            date_of_birth: Student date of birth, DD/MM/YYYY.
            base_url: ClassCharts base URL.
            timeout: Per-request timeout in seconds.
            session: Optional requests session (tests pass a stub).
        """
        self.code = code
        self.date_of_birth = date_of_birth
        self.api_url = base_url.rstrip("/") + API_PATH
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session_id: str | None = None
        self.student_id: int | None = None

    def _auth_headers(self) -> dict[str, str]:
        return {"Authorization": f"Basic {self.session_id}"}

    def login(self) -> None:
        """Log in with the student code and load the student id.

        Raises:
            AuthenticationError: If ClassCharts rejects the credentials or the
                login response cannot be understood.
        """
        if not self.code:
            raise AuthenticationError("No ClassCharts code supplied")

        form = {
            "_method": "POST",
            "code": self.code.upper(),
            "dob": self.date_of_birth or "",
            "remember_me": "1",
            "recaptcha-token": "no-token-available",
        }
        logger.info("login_started", url=f"{self.api_url}/login")

        try:
            response = self.session.post(
                f"{self.api_url}/login",
                data=form,
                allow_redirects=False,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error("login_request_failed", error=str(e))
            raise AuthenticationError(f"Login request failed: {e}") from e

        raw_credentials = response.cookies.get(SESSION_COOKIE)
        if not raw_credentials:
            logger.error(
                "login_rejected",
                status=response.status_code,
                reason="no_session_cookie",
            )
            raise AuthenticationError(
                "ClassCharts did not return session credentials"
            )

        try:
            self.session_id = json.loads(unquote(raw_credentials))["session_id"]
        except (ValueError, KeyError, TypeError) as e:
            raise AuthenticationError(f"Unreadable session credentials: {e}") from e

        self._ping()
        logger.info("login_succeeded", student_id=self.student_id)

    def _ping(self) -> None:
        """Refresh the session id and read the logged-in student's id."""
        try:
            response = self.session.post(
                f"{self.api_url}/ping",
                data={"include_data": "true"},
                headers=self._auth_headers(),
                timeout=self.timeout,
            )
            response.raise_for_status()
            body = response.json()
        except (requests.RequestException, ValueError) as e:
            raise AuthenticationError(f"Session check failed: {e}") from e

        if not body.get("success"):
            raise AuthenticationError(body.get("error") or "Session check failed")

        try:
            self.student_id = body["data"]["user"]["id"]
        except (KeyError, TypeError) as e:
            raise AuthenticationError("Session check returned no student") from e
        self.session_id = body.get("meta", {}).get("session_id") or self.session_id

    def get_lessons(self, date: str) -> list[Lesson]:
        """Fetch the lessons for one day.

        Args:
            date: Day in YYYY-MM-DD format.

        Returns:
            Lessons in the order ClassCharts lists them.

        Raises:
            AuthenticationError: If called before login().
            DayFetchError: If the request fails or ClassCharts reports an error.
        """
        if self.student_id is None:
            raise AuthenticationError("Not logged in to ClassCharts")

        try:
            response = self.session.get(
                f"{self.api_url}/timetable/{self.student_id}",
                params={"date": date},
                headers=self._auth_headers(),
                timeout=self.timeout,
            )
            response.raise_for_status()
            body = response.json()
        except (requests.RequestException, ValueError) as e:
            raise DayFetchError(f"Timetable request for {date} failed: {e}") from e

        if not body.get("success"):
            raise DayFetchError(
                f"ClassCharts error for {date}: {body.get('error', 'unknown error')}"
            )

        lessons = [Lesson.model_validate(item) for item in body.get("data") or []]
        logger.debug("lessons_fetched", date=date, count=len(lessons))
        return lessons
