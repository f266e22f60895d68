"""Templated support replies.

The reply is assembled from fixed fragments:

    opening (sentiment x priority)
    urgency block (urgent only)
    exactly one topic block, first matching rule wins
    follow-up commitment, closing, reference line

Topic rules are an ordered list of (predicate, builder) pairs; a rule may match
on content another rule would also match, ordering alone decides.
"""
import time
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple


@dataclass(frozen=True)
class ReplyContext:
    sentiment: str
    priority: str
    subject: str  # lower-cased
    body: str  # lower-cased

    @property
    def urgent(self) -> bool:
        return self.priority == 'urgent'

    def subject_has(self, *terms: str) -> bool:
        return any(t in self.subject for t in terms)

    def body_has(self, *terms: str) -> bool:
        return any(t in self.body for t in terms)


Rule = Tuple[Callable[[ReplyContext], bool], Callable[[ReplyContext], str]]

SIGNATURE = "Best regards,\nAI Support Assistant\nCustomer Success Team"
CLOSING = (
    "If you need any immediate clarification or have additional questions, please don't hesitate "
    "to reply to this email or contact our support team directly."
)


def _opening(ctx: ReplyContext) -> str:
    if ctx.sentiment == 'negative':
        if ctx.urgent:
            return ("Thank you for reaching out. I understand this is an urgent matter causing significant "
                    "inconvenience, and I sincerely apologize for the situation you're experiencing. ")
        return "Thank you for contacting us, and I sincerely apologize for any inconvenience you've experienced. "
    if ctx.sentiment == 'positive':
        return "Thank you for your email! It's wonderful to hear from you, and I appreciate your positive feedback. "
    return ("Thank you for contacting our support team. I've received your inquiry and will ensure it "
            "receives proper attention. ")


def _urgency(ctx: ReplyContext) -> str:
    if not ctx.urgent:
        return ""
    text = ("I understand this is an urgent matter that requires immediate attention. I'm prioritizing "
            "your request and will ensure our team addresses this promptly. ")
    if ctx.body_has('affecting operations', 'business'):
        text += "Given the business impact you've described, I'm escalating this to our priority support queue. "
    if ctx.body_has('since yesterday', 'multiple attempts'):
        text += "I see you've been experiencing this issue for some time, which is unacceptable. "
    return text


def _access(ctx: ReplyContext) -> str:
    text = "For login and password issues: "
    if ctx.body_has('reset', 'password'):
        text += ("I can see you're having trouble with password reset. Please check your spam folder for the "
                 "reset email, and if you still don't see it, I'll send you a direct reset link within the "
                 "next 15 minutes. ")
    else:
        text += ("I'll help you regain access to your account. Our technical team will verify your account "
                 "status and send you new login credentials within 2 hours. ")
    if ctx.urgent:
        text += "For immediate assistance, you can also contact our emergency support line. "
    return text


def _billing(ctx: ReplyContext) -> str:
    text = "Regarding your billing inquiry: "
    if ctx.body_has('charged twice', 'unexpected charge'):
        text += ("I've flagged your account for immediate billing review. Our billing specialist will "
                 "investigate the duplicate charge and process a refund if applicable within 24 hours. ")
    else:
        text += ("Our billing team will review your account details and provide a detailed explanation of "
                 "all charges within 24 hours. ")
    return text + "You'll receive a full breakdown via email, and any discrepancies will be corrected immediately. "


def _technical(ctx: ReplyContext) -> str:
    text = "For your technical issue: "
    if 'server' in ctx.body and 'down' in ctx.body:
        text += ("I can confirm we're experiencing some server issues. Our engineering team is actively "
                 "working on a resolution, and we expect service to be restored within 2 hours. ")
    else:
        text += "Our development team has been notified of this technical issue and will investigate it immediately. "
    return text + "I'll keep you updated on the progress and notify you as soon as it's resolved. "


def _integration(ctx: ReplyContext) -> str:
    text = ("For your integration inquiry: Yes, we do support various third-party integrations including "
            "CRM systems. Our integration specialist will contact you within 4 hours with detailed "
            "documentation and setup instructions specific to your needs. ")
    if 'api' in ctx.body:
        text += "I'll also include API documentation and sample code to help with your implementation. "
    return text


def _verification(ctx: ReplyContext) -> str:
    return ("For account verification issues: I'll immediately resend your verification email and also "
            "manually verify your account on our end. You should receive the new verification email within "
            "10 minutes. If you continue to have issues, please let me know and I'll verify your account directly. ")


def _refund(ctx: ReplyContext) -> str:
    return ("Regarding your refund request: I'll review your account and refund eligibility immediately. Our "
            "standard refund process takes 3-5 business days, but given your situation, I'll expedite this to "
            "be processed within 24 hours. ")


def _subscription(ctx: ReplyContext) -> str:
    return ("For your subscription inquiry: I'll provide you with detailed information about our current "
            "pricing plans and any available discounts. Our sales team will also reach out to discuss options "
            "that best fit your needs. ")


def _general(ctx: ReplyContext) -> str:
    return ("I've carefully reviewed your request and will ensure it gets the specialized attention it "
            "requires. Our appropriate team will analyze your specific situation and provide a comprehensive "
            "response within 24-48 hours. ")


TOPIC_RULES: List[Rule] = [
    (lambda c: c.subject_has('password', 'login') or c.body_has('log into', 'cannot access'), _access),
    (lambda c: c.subject_has('billing', 'payment', 'charged') or c.body_has('billing issue'), _billing),
    (lambda c: c.subject_has('technical', 'bug', 'error') or c.body_has('server', 'down'), _technical),
    (lambda c: c.subject_has('integration', 'api') or c.body_has('third-party', 'crm'), _integration),
    (lambda c: c.subject_has('verification') or c.body_has('verification email', 'never arrived'), _verification),
    (lambda c: c.subject_has('refund') or c.body_has('refund'), _refund),
    (lambda c: c.subject_has('subscription', 'pricing'), _subscription),
]


def topic_block(ctx: ReplyContext) -> str:
    for matches, build in TOPIC_RULES:
        if matches(ctx):
            return build(ctx)
    return _general(ctx)


def _follow_up(ctx: ReplyContext) -> str:
    if ctx.urgent:
        return "For urgent matters like this, I'll personally monitor the progress and send you updates every 2 hours until resolved. "
    return "I'll follow up with you within 24 hours with a detailed update on the progress. "


def reference_id(now_ms: Optional[int] = None) -> str:
    if now_ms is None:
        now_ms = time.time_ns() // 1_000_000
    return f"REF-{str(now_ms)[-6:]}"


def generate_ai_response(email) -> str:
    """Build the reply for an email carrying sentiment, priority, subject and body."""
    ctx = ReplyContext(
        sentiment=email.sentiment,
        priority=email.priority,
        subject=(email.subject or '').lower(),
        body=(email.body or '').lower(),
    )
    response = _opening(ctx) + _urgency(ctx) + topic_block(ctx)
    response += "\n\n" + _follow_up(ctx) + CLOSING
    response += "\n\n" + SIGNATURE
    response += f"\n\nReference: {reference_id()}"
    return response
