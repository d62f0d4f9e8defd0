"""Human-readable identifier generation."""

import re
import secrets
import string
from datetime import UTC, date, datetime
from uuid import UUID

_CODE_ALPHABET = string.digits + string.ascii_uppercase
_USER_ID_RE = re.compile(r"^USER-(\d{8})-\d{4}$")


def _random_code(length: int) -> str:
    return "".join(secrets.choice(_CODE_ALPHABET) for _ in range(length))


def _four_digits() -> int:
    return 1000 + secrets.randbelow(9000)


def generate_patient_id(today: date | None = None) -> str:
    """Patient code in the form ``PT-YYYY-XXXXXX``."""
    year = (today or datetime.now(UTC).date()).year
    return f"PT-{year}-{_random_code(6)}"


def generate_custom_id(prefix: str = "USER", registered: date | None = None) -> str:
    """Identifier in the form ``<PREFIX>-YYYYMMDD-NNNN``."""
    day = registered or datetime.now(UTC).date()
    return f"{prefix}-{day:%Y%m%d}-{_four_digits()}"


def generate_user_id(registered: date | None = None) -> str:
    """User identifier in the form ``USER-YYYYMMDD-NNNN``."""
    return generate_custom_id("USER", registered)


def validate_user_id(user_id: str) -> bool:
    """Check the ``USER-YYYYMMDD-NNNN`` format."""
    return bool(_USER_ID_RE.match(user_id))


def extract_date_from_user_id(user_id: str) -> date | None:
    """Return the registration date embedded in a user id, if valid."""
    match = _USER_ID_RE.match(user_id)
    if not match:
        return None
    try:
        return datetime.strptime(match.group(1), "%Y%m%d").date()
    except ValueError:
        return None


def generate_employee_id(role: str, now: datetime | None = None) -> str:
    """Staff identifier in the form ``EMP-<ROL>-<epoch ms>``."""
    stamp = int((now or datetime.now(UTC)).timestamp() * 1000)
    return f"EMP-{role.upper()[:3]}-{stamp}"


def generate_order_number(now: datetime | None = None) -> str:
    """Purchase order number in the form ``PO-<epoch ms>-XXXXXX``."""
    stamp = int((now or datetime.now(UTC)).timestamp() * 1000)
    return f"PO-{stamp}-{_random_code(6)}"


def generate_invoice_number(today: date | None = None) -> str:
    """Invoice number in the form ``INV-YYYYMMDD-NNNN``."""
    return generate_custom_id("INV", today)


def prescription_code(prescription_id: UUID) -> str:
    """Display code ``RX-`` plus the last eight hex digits of the id."""
    return f"RX-{prescription_id.hex[-8:].upper()}"


def generate_payroll_id(year: int, month: int) -> str:
    """Payroll identifier in the form ``PAY-YYYYMM-XXXXXX``."""
    return f"PAY-{year:04d}{month:02d}-{_random_code(6)}"


def generate_utility_id() -> str:
    """Utility expense identifier: six characters of ``[A-Z0-9]``."""
    return _random_code(6)
