import email_validator
from email_validator import validate_email
from pydantic import AfterValidator, BaseModel, Field, model_validator
from typing import Annotated, Optional, List

# Staff accounts are provisioned on the internal keno.local domain, which
# email-validator rejects as special-use unless it is taken off its list.
if "local" in email_validator.SPECIAL_USE_DOMAIN_NAMES:
    email_validator.SPECIAL_USE_DOMAIN_NAMES.remove("local")


def normalize_email(value: str) -> str:
    """Syntax check only; internal domains such as keno.local are accepted."""
    return validate_email(value, check_deliverability=False, globally_deliverable=False).normalized


EmailAddress = Annotated[str, AfterValidator(normalize_email)]


class LoginRequest(BaseModel):
    email: EmailAddress
    password: str


class RecoveryRequest(BaseModel):
    email: EmailAddress


class RecoveryConfirmRequest(BaseModel):
    token_hash: str
    password: str = Field(min_length=8)
    password_confirm: str

    @model_validator(mode="after")
    def passwords_match(self):
        if self.password != self.password_confirm:
            raise ValueError("Passwords do not match")
        return self


class UserSummary(BaseModel):
    id: str
    email: Optional[str] = None
    name: Optional[str] = None


class TeamSummary(BaseModel):
    id: str
    name: str


class RoleSummary(BaseModel):
    id: str
    name: str


class AuthorizationPayload(BaseModel):
    user: UserSummary
    team: TeamSummary
    role: RoleSummary
    permissions: List[str]
    groups: List[str]


class TokenResponse(BaseModel):
    access_token: str
    refresh_token: Optional[str] = None
    token_type: str = "bearer"
    authorization: AuthorizationPayload


class ProfileResponse(BaseModel):
    id: str
    email: Optional[str] = None
    full_name: Optional[str] = None
    phone: Optional[str] = None
    email_verified: bool


class ProfileUpdate(BaseModel):
    full_name: Optional[str] = Field(default=None, min_length=1, max_length=150)
    phone: Optional[str] = Field(default=None, max_length=30)
    password: Optional[str] = Field(default=None, min_length=8)
    current_password: Optional[str] = None

    @model_validator(mode="after")
    def current_password_required(self):
        if self.password and not self.current_password:
            raise ValueError("current_password is required to change the password")
        return self
