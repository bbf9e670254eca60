# =============================================================================
# app/forms/ - Auth Form Controllers
# =============================================================================
# Presentation-side logic for the auth pages:
# - schemas.py: what each form collects and how it is validated
# - state.py: loading / error / success state and password visibility
# - controllers.py: submit flow for login, signup, forgot and reset password
#
# The HTML lives in app/templates/; the page routes in app/routers/pages.py.
# =============================================================================

from app.forms.controllers import (
    AuthForm,
    ForgotPasswordForm,
    FormOutcome,
    LoginForm,
    ResetPasswordForm,
    SignupForm,
)
from app.forms.state import FormState, FormStatus

__all__ = [
    "AuthForm",
    "ForgotPasswordForm",
    "FormOutcome",
    "FormState",
    "FormStatus",
    "LoginForm",
    "ResetPasswordForm",
    "SignupForm",
]
