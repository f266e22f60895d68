import re
from types import SimpleNamespace

from backend.app.services.auto_responder import generate_ai_response, reference_id


def _email(subject, body, sentiment='neutral', priority='normal'):
    return SimpleNamespace(subject=subject, body=body, sentiment=sentiment, priority=priority)


def _without_reference(text: str) -> str:
    return text.rsplit("\n\nReference: ", 1)[0]


def test_reference_line_format():
    reply = generate_ai_response(_email("Hello", "Just a question"))
    ref = reply.rsplit("Reference: ", 1)[1]
    assert re.match(r"^REF-\d{6}$", ref)


def test_reference_uses_last_six_digits():
    assert reference_id(1724660000123) == "REF-000123"


def test_deterministic_apart_from_reference():
    email = _email("Billing question", "I was charged twice", 'negative', 'urgent')
    assert _without_reference(generate_ai_response(email)) == _without_reference(generate_ai_response(email))


def test_openings():
    assert generate_ai_response(_email("x", "y", 'negative', 'urgent')).startswith(
        "Thank you for reaching out. I understand this is an urgent matter causing significant inconvenience")
    assert generate_ai_response(_email("x", "y", 'negative')).startswith(
        "Thank you for contacting us, and I sincerely apologize")
    assert generate_ai_response(_email("x", "y", 'positive')).startswith("Thank you for your email!")
    assert generate_ai_response(_email("x", "y")).startswith("Thank you for contacting our support team.")


def test_urgent_block_and_follow_up():
    reply = generate_ai_response(_email("Outage", "This is affecting operations since yesterday", 'negative', 'urgent'))
    assert "I'm prioritizing your request" in reply
    assert "escalating this to our priority support queue" in reply
    assert "experiencing this issue for some time" in reply
    assert "updates every 2 hours until resolved" in reply


def test_normal_follow_up():
    reply = generate_ai_response(_email("Hello", "Just a question"))
    assert "I'm prioritizing your request" not in reply
    assert "\n\nI'll follow up with you within 24 hours" in reply


def test_first_matching_topic_wins():
    reply = generate_ai_response(_email("Password and billing", "charged twice"))
    assert "For login and password issues:" in reply
    assert "billing inquiry" not in reply


def test_login_branch_reset_vs_access():
    reset = generate_ai_response(_email("Login problem", "the reset link is broken"))
    assert "trouble with password reset" in reset
    access = generate_ai_response(_email("Help", "I cannot access my dashboard"))
    assert "regain access to your account" in access


def test_technical_branch_confirms_outage():
    reply = generate_ai_response(_email("Hello", "the server is down"))
    assert "For your technical issue:" in reply
    assert "server issues" in reply


def test_integration_branch_mentions_api_docs():
    reply = generate_ai_response(_email("Integration", "Do you have an api for crm sync?"))
    assert "For your integration inquiry:" in reply
    assert "API documentation" in reply


def test_fallback_branch():
    reply = generate_ai_response(_email("Hello", "Just a question"))
    assert "comprehensive response within 24-48 hours" in reply


def test_closing_block():
    reply = generate_ai_response(_email("Hello", "Just a question"))
    assert "\n\nBest regards,\nAI Support Assistant\nCustomer Success Team\n\nReference: REF-" in reply


def test_billing_branch_duplicate_charge():
    reply = generate_ai_response(_email("Billing question", "I was charged twice this month"))
    assert "Regarding your billing inquiry:" in reply
    assert "duplicate charge" in reply
    assert "detailed explanation of all charges" not in reply


def test_billing_branch_general():
    reply = generate_ai_response(_email("Billing question", "Can you explain my invoice?"))
    assert "detailed explanation of all charges" in reply
    assert "duplicate charge" not in reply


def test_technical_branch_generic_bug():
    reply = generate_ai_response(_email("Bug report", "The export button does nothing"))
    assert "Our development team has been notified" in reply
    assert "server issues" not in reply


def test_verification_branch():
    reply = generate_ai_response(_email("Account verification", "Hi there"))
    assert "resend your verification email" in reply


def test_refund_branch():
    reply = generate_ai_response(_email("Refund request", "Please return my money"))
    assert "3-5 business days" in reply


def test_subscription_branch():
    reply = generate_ai_response(_email("Subscription pricing", "What plans do you offer?"))
    assert "pricing plans" in reply
