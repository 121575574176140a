from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class EmailSettings:
    service_id: str
    template_id: str
    otp_template_id: str
    public_key: str
    private_key: str = ""

    PLACEHOLDER_PUBLIC_KEY = "your_emailjs_public_key"

    @property
    def is_configured(self) -> bool:
        return bool(
            self.public_key
            and self.public_key != self.PLACEHOLDER_PUBLIC_KEY
            and self.service_id
            and self.template_id
        )


@dataclass(frozen=True)
class AbsenceAlert:
    parent_email: str
    student_name: str
    registration_number: str
    attendance_date: str
    parent_name: str = "Parent"


@dataclass(frozen=True)
class SendResult:
    success: bool
    message: str


@dataclass
class BulkSendResult:
    sent: int = 0
    failed: int = 0
    errors: list[str] = field(default_factory=list)
