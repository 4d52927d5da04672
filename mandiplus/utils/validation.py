"""
Input validation for onboarding forms.

- Mobile number and OTP format checks
- Aadhaar number check
- Indian state codes accepted by the backend
"""

import re
from typing import Dict

INDIAN_STATES: Dict[str, str] = {
    "ANDHRA_PRADESH": "Andhra Pradesh",
    "ARUNACHAL_PRADESH": "Arunachal Pradesh",
    "ASSAM": "Assam",
    "BIHAR": "Bihar",
    "CHHATTISGARH": "Chhattisgarh",
    "GOA": "Goa",
    "GUJARAT": "Gujarat",
    "HARYANA": "Haryana",
    "HIMACHAL_PRADESH": "Himachal Pradesh",
    "JHARKHAND": "Jharkhand",
    "KARNATAKA": "Karnataka",
    "KERALA": "Kerala",
    "MADHYA_PRADESH": "Madhya Pradesh",
    "MAHARASHTRA": "Maharashtra",
    "MANIPUR": "Manipur",
    "MEGHALAYA": "Meghalaya",
    "MIZORAM": "Mizoram",
    "NAGALAND": "Nagaland",
    "ODISHA": "Odisha",
    "PUNJAB": "Punjab",
    "RAJASTHAN": "Rajasthan",
    "SIKKIM": "Sikkim",
    "TAMIL_NADU": "Tamil Nadu",
    "TELANGANA": "Telangana",
    "TRIPURA": "Tripura",
    "UTTAR_PRADESH": "Uttar Pradesh",
    "UTTARAKHAND": "Uttarakhand",
    "WEST_BENGAL": "West Bengal",
    "DELHI": "Delhi",
}

_INDIAN_MOBILE = re.compile(r"^[6-9]\d{9}$")


def digits_only(value: str) -> str:
    """Strip everything except digits."""
    return re.sub(r"\D", "", value or "")


def is_valid_mobile(mobile_number: str) -> bool:
    """
    Check for a 10-digit mobile number.

    Args:
        mobile_number: Raw user input.

    Returns:
        True if the input is exactly ten digits.
    """
    return bool(mobile_number) and len(mobile_number) == 10 and mobile_number.isdigit()


def is_valid_indian_mobile(mobile_number: str) -> bool:
    """Stricter check used on registration: must start with 6-9."""
    return bool(_INDIAN_MOBILE.match(mobile_number or ""))


def is_valid_otp(otp: str) -> bool:
    return bool(otp) and len(otp) == 6 and otp.isdigit()


def is_valid_aadhaar(aadhaar_number: str) -> bool:
    return len(digits_only(aadhaar_number)) >= 8


def is_valid_state(state: str) -> bool:
    return state in INDIAN_STATES
