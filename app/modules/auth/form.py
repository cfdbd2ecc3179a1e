"""
State machine behind the sign-in / create-account form.

One controller instance backs one form. It tracks the mode, the field
values and the error/busy flags, and drives AuthService on submit.

Mode switching keeps the email and clears the password.
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from starlette.concurrency import run_in_threadpool

from app.modules.auth.errors import AuthFlowError, UsernameValidationError
from app.modules.auth.models import Session
from app.modules.auth.service import AuthService
from app.modules.auth.username import validate_username

logger = logging.getLogger(__name__)

GENERIC_ERROR = "Something went wrong"
UNEXPECTED_ERROR = "Unexpected error"


class FormMode(str, Enum):
    SIGN_IN = "sign_in"
    SIGN_UP = "sign_up"


@dataclass
class FormState:
    mode: FormMode = FormMode.SIGN_IN
    email: str = ""
    username: str = ""
    password: str = ""
    error: str = ""
    username_error: str = ""
    is_submitting: bool = False

    @property
    def is_sign_in(self) -> bool:
        return self.mode == FormMode.SIGN_IN

    @property
    def submit_label(self) -> str:
        if self.is_submitting:
            return "Signing in..." if self.is_sign_in else "Creating account..."
        return "Sign In" if self.is_sign_in else "Create Account"


class AuthFormController:
    def __init__(
        self,
        service: AuthService,
        on_success: Optional[Callable[[Session], None]] = None,
        state: Optional[FormState] = None,
    ):
        self.service = service
        self.on_success = on_success
        self.state = state or FormState()
        self.session: Optional[Session] = None

    def _clear_errors(self):
        self.state.error = ""
        self.state.username_error = ""

    def set_mode(self, mode: FormMode):
        self.state.mode = FormMode(mode)
        self.state.password = ""
        self._clear_errors()

    def toggle_mode(self):
        self.set_mode(FormMode.SIGN_UP if self.state.is_sign_in else FormMode.SIGN_IN)

    async def submit(self) -> bool:
        """Run one submission. Returns True on success.

        A submit while another is in flight is ignored.
        """
        if self.state.is_submitting:
            return False

        self._clear_errors()
        self.state.is_submitting = True
        try:
            if self.state.is_sign_in:
                session = await run_in_threadpool(
                    self.service.sign_in, self.state.email, self.state.password
                )
            else:
                validation = validate_username(self.state.username)
                if not validation.valid:
                    self.state.username_error = validation.error or "Invalid username"
                    return False
                session = await run_in_threadpool(
                    self.service.sign_up,
                    self.state.email,
                    self.state.password,
                    validation.sanitized,
                )
        except UsernameValidationError as e:
            self.state.username_error = e.message
            return False
        except AuthFlowError as e:
            self.state.error = e.message or GENERIC_ERROR
            return False
        except Exception as e:
            logger.exception(f"Unexpected error during {self.state.mode.value}: {e}")
            self.state.error = UNEXPECTED_ERROR
            return False
        finally:
            self.state.is_submitting = False

        self.session = session
        if self.on_success is not None:
            self.on_success(session)
        return True
