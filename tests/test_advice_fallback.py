from assistant.advice_fallback import (
    ADVICE_RESPONSES,
    GENERAL_SAFETY_CHECKLIST,
    FallbackAdvisor,
)

_RESPONSES = dict(ADVICE_RESPONSES)


def test_night_question_gets_night_advice():
    advice = FallbackAdvisor().get_fallback("Is it safe to walk alone at night?")
    assert advice == _RESPONSES["night"]
    assert advice.startswith("For night safety:")


def test_first_keyword_in_table_order_wins():
    # "walking" precedes "night" in the table
    advice = FallbackAdvisor().get_fallback("Walking home at NIGHT")
    assert advice == _RESPONSES["walking"]


def test_unmatched_question_gets_general_checklist():
    advice = FallbackAdvisor().get_fallback("How do I stay safe?")
    assert advice == GENERAL_SAFETY_CHECKLIST
    assert "5. Use the SOS button if you feel unsafe" in advice


def test_is_deterministic():
    advisor = FallbackAdvisor()
    assert advisor.get_fallback("travel tips") == advisor.get_fallback("travel tips")


def test_custom_table():
    advisor = FallbackAdvisor((("bus", "Sit near the driver."),), default="generic")
    assert advisor.get_fallback("Late BUS ride") == "Sit near the driver."
    assert advisor.get_fallback("anything else") == "generic"
