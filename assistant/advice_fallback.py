"""
Offline safety advice.

Deterministic keyword -> canned text responder used whenever the remote
advisor is unconfigured or fails. No I/O.
"""

from __future__ import annotations

# First matching keyword wins.
ADVICE_RESPONSES: tuple[tuple[str, str], ...] = (
    (
        "walking",
        "When walking alone:\n"
        "1. Stay in well-lit areas\n"
        "2. Keep your phone charged\n"
        "3. Share your location with trusted contacts\n"
        "4. Be aware of your surroundings",
    ),
    (
        "night",
        "For night safety:\n"
        "1. Use well-lit routes\n"
        "2. Stay in populated areas\n"
        "3. Have emergency contacts ready\n"
        "4. Consider using a ride-sharing service",
    ),
    (
        "emergency",
        "In an emergency:\n"
        "1. Call emergency services (911)\n"
        "2. Use the SOS button in the app\n"
        "3. Share your location with trusted contacts\n"
        "4. Stay calm and follow instructions",
    ),
    (
        "travel",
        "When traveling:\n"
        "1. Share your itinerary with trusted contacts\n"
        "2. Keep important documents secure\n"
        "3. Have emergency numbers saved\n"
        "4. Use the app's location sharing feature",
    ),
    (
        "public",
        "In public places:\n"
        "1. Stay aware of your surroundings\n"
        "2. Keep valuables secure\n"
        "3. Have an exit plan\n"
        "4. Trust your instincts if something feels wrong",
    ),
)

GENERAL_SAFETY_CHECKLIST = (
    "For your safety:\n"
    "1. Stay alert and aware of your surroundings\n"
    "2. Keep your phone charged and accessible\n"
    "3. Have emergency contacts ready\n"
    "4. Trust your instincts\n"
    "5. Use the SOS button if you feel unsafe\n"
    "\n"
    "For immediate help, switch to Emergency Services mode or call emergency services."
)


class FallbackAdvisor:
    def __init__(
        self,
        responses: tuple[tuple[str, str], ...] = ADVICE_RESPONSES,
        default: str = GENERAL_SAFETY_CHECKLIST,
    ) -> None:
        if not responses:
            raise ValueError("advice keyword table must not be empty")
        self._responses = tuple((kw.lower(), text) for kw, text in responses)
        self._default = default

    def get_fallback(self, question: str) -> str:
        text = (question or "").lower()
        for keyword, response in self._responses:
            if keyword in text:
                return response
        return self._default
