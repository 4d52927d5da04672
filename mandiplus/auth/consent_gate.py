"""
Consent Gate.

Blocks the application until the signed-in user has acknowledged the
current insurance terms.
"""

import threading
from enum import Enum
from typing import Dict, Optional

from mandiplus.api.user_client import UserApi
from mandiplus.auth.errors import AuthError, ConsentSubmitFailed
from mandiplus.auth.models import ConsentAcknowledgment, UserProfile
from mandiplus.state.session_store import SessionStore
from mandiplus.utils.logger import get_logger

logger = get_logger(__name__)

CONSENT_TITLE = "Mandi Plus: Insurance Consent Acknowledgment"

CONSENT_TEXT: Dict[str, str] = {
    "en": (
        "I confirm that I have read, understood, and accepted the terms of the "
        "Memorandum of Understanding (MOU) with Mandi Plus (ENP FARMS PVT LTD). "
        "I accept the insurance terms and conditions and the guidelines for any "
        "loss/damage of my agricultural goods during transit as per the clauses "
        "mentioned in the insurance certificate issued by TATA AIG and the "
        "Invoice copy issued by Mandi Plus. In case of any claim request raised "
        "by me, I am obliged and responsible to provide all supporting documents "
        "related to the consignment (such as FIR, GPS Pictures, Weighment Slips, "
        "and Damage Certificate)."
    ),
    "hi": (
        "मैं यह पुष्टि करता हूँ कि मैंने Mandi Plus (ENP FARMS PVT LTD) के साथ "
        "समझौता ज्ञापन (MOU) की शर्तों को पढ़ और समझ लिया है। मैं अपने कृषि सामान "
        "(Agri-goods) के ट्रांसपोर्ट के दौरान होने वाले किसी भी नुकसान या डैमेज के "
        "लिए TATA AIG द्वारा जारी इंश्योरेंस सर्टिफिकेट और Mandi Plus के इनवॉइस में "
        "दी गई शर्तों को स्वीकार करता हूँ। यदि मैं भविष्य में कोई क्लेम (Claim) डालता "
        "हूँ, तो उसकी जिम्मेदारी मेरी होगी कि मैं माल से जुड़े सभी जरूरी दस्तावेज "
        "(जैसे FIR, फोटो, कांटे की पर्ची और डैमेज सर्टिफिकेट) उपलब्ध कराऊं।"
    ),
}

_LANGUAGE_SUFFIX = {"en": "", "hi": " (Hindi)"}


def consent_payload(language: str) -> str:
    """Full text submitted as `consentText` for the chosen language."""
    if language not in CONSENT_TEXT:
        raise ValueError(f"Unsupported consent language: {language}")
    return f"{CONSENT_TITLE}{_LANGUAGE_SUFFIX[language]} - {CONSENT_TEXT[language]}"


class GateState(str, Enum):
    LOADING = "LOADING"
    ALLOWED = "ALLOWED"
    BLOCKED = "BLOCKED"


def evaluate_gate(profile: Optional[UserProfile], *, loading: bool = False) -> GateState:
    """
    Decide whether the application may be used.

    Only a known profile without consent blocks; no profile means there is
    nobody to ask yet.
    """
    if loading:
        return GateState.LOADING
    if profile is not None and profile.consent_given is not True:
        return GateState.BLOCKED
    return GateState.ALLOWED


class ConsentGate:
    """
    Consent acknowledgment for the current session's user.

    At most one submission is in flight; a second trigger while one is
    pending is ignored.
    """

    def __init__(self, store: SessionStore, users: UserApi) -> None:
        self._store = store
        self._users = users
        self._in_flight = threading.Lock()

    @property
    def pending(self) -> bool:
        return self._in_flight.locked()

    def state(self, *, loading: bool = False) -> GateState:
        return evaluate_gate(self._store.get_session().user, loading=loading)

    def acknowledge(self, language: str = "en") -> GateState:
        """
        Record consent and unblock the application.

        On success the cached profile is flipped to `consent_given=True`
        without re-fetching it. Already consented users cause no request.

        Raises:
            ConsentSubmitFailed: The backend refused or could not be
                reached; the gate stays BLOCKED and the call may be retried.
        """
        session = self._store.get_session()
        user = session.user

        if user is None:
            logger.warning("Consent acknowledgment without a profile; ignoring")
            return self.state()

        if user.consent_given:
            return GateState.ALLOWED

        if not self._in_flight.acquire(blocking=False):
            logger.info(
                "Consent submission already in flight; ignoring",
                extra={"user_id": user.id},
            )
            return self.state()

        try:
            acknowledgment = ConsentAcknowledgment(
                consent_text=consent_payload(language),
                language=language,
            )
            self._users.record_consent(user.id, acknowledgment)

        except ConsentSubmitFailed:
            logger.exception("Consent submission failed", extra={"user_id": user.id})
            raise

        except AuthError as exc:
            logger.exception("Consent submission failed", extra={"user_id": user.id})
            raise ConsentSubmitFailed(status_code=exc.status_code) from exc

        finally:
            self._in_flight.release()

        self._store.mark_consent_given(
            user.id,
            expected_generation=session.generation,
        )
        return self.state()
