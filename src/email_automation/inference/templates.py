"""
Fixed text templates used by the local inference engine.

Summaries are keyed by category and parameterized by priority; replies are keyed
by (intent, tone). No generative synthesis happens here.
"""

from email_automation.models.enums import Category, ResponseIntent, Tone


SUMMARY_TEMPLATES: dict[Category, str] = {
    Category.URGENT: "Urgent message that needs prompt attention ({priority} priority).",
    Category.SUPPORT: "Support request describing an issue that needs assistance ({priority} priority).",
    Category.SALES: "Sales-related message about pricing, offers or purchases ({priority} priority).",
    Category.MEETING: "Message about scheduling or attending a meeting ({priority} priority).",
    Category.REPORT: "Report or status update sharing results ({priority} priority).",
    Category.COMPLAINT: "Complaint expressing dissatisfaction that needs follow-up ({priority} priority).",
    Category.GENERAL: "General correspondence ({priority} priority).",
}

RESPONSE_TEMPLATES: dict[tuple[ResponseIntent, Tone], str] = {
    # meeting
    (ResponseIntent.MEETING, Tone.PROFESSIONAL): (
        "Thank you for reaching out about the meeting. I will check my availability "
        "and confirm a suitable time shortly."
    ),
    (ResponseIntent.MEETING, Tone.FRIENDLY): (
        "Thanks for the invite! Let me check my calendar and I'll get back to you "
        "with a time that works."
    ),
    (ResponseIntent.MEETING, Tone.FORMAL): (
        "Thank you for your invitation. I shall review my schedule and confirm my "
        "availability at the earliest opportunity."
    ),
    (ResponseIntent.MEETING, Tone.CASUAL): "Sounds good, let me check my calendar and get back to you.",
    # thanks
    (ResponseIntent.THANKS, Tone.PROFESSIONAL): (
        "Thank you for your message. I'm glad I could help, and please let me know "
        "if there is anything else you need."
    ),
    (ResponseIntent.THANKS, Tone.FRIENDLY): "You're very welcome! Happy to help anytime.",
    (ResponseIntent.THANKS, Tone.FORMAL): (
        "Thank you for your kind words. It has been a pleasure to be of assistance."
    ),
    (ResponseIntent.THANKS, Tone.CASUAL): "No problem at all, glad it helped!",
    # question
    (ResponseIntent.QUESTION, Tone.PROFESSIONAL): (
        "Thank you for your question. I will look into it and get back to you with "
        "an answer shortly."
    ),
    (ResponseIntent.QUESTION, Tone.FRIENDLY): (
        "Great question! Let me look into it and I'll get back to you soon."
    ),
    (ResponseIntent.QUESTION, Tone.FORMAL): (
        "Thank you for your enquiry. I will review the matter and respond with the "
        "requested information in due course."
    ),
    # request
    (ResponseIntent.REQUEST, Tone.PROFESSIONAL): (
        "Thank you for your request. I have noted it and will follow up once it "
        "has been completed."
    ),
    (ResponseIntent.REQUEST, Tone.FRIENDLY): "Got it! I'll take care of this and let you know when it's done.",
    (ResponseIntent.REQUEST, Tone.FORMAL): (
        "Your request has been received and will be addressed promptly. I will "
        "inform you upon its completion."
    ),
    # complaint
    (ResponseIntent.COMPLAINT, Tone.PROFESSIONAL): (
        "Thank you for bringing this to our attention. I apologize for the "
        "inconvenience and will investigate the issue right away."
    ),
    (ResponseIntent.COMPLAINT, Tone.FORMAL): (
        "Please accept our sincere apologies for the inconvenience caused. The "
        "matter is being reviewed and we will respond with a resolution."
    ),
    # general
    (ResponseIntent.GENERAL, Tone.PROFESSIONAL): (
        "Thank you for your email. I have received your message and will respond "
        "as soon as possible."
    ),
    (ResponseIntent.GENERAL, Tone.FRIENDLY): "Thanks for your email! I'll get back to you soon.",
    (ResponseIntent.GENERAL, Tone.FORMAL): (
        "Thank you for your correspondence. I acknowledge receipt of your message "
        "and will reply in due course."
    ),
    (ResponseIntent.GENERAL, Tone.CASUAL): "Thanks, got your message. Will reply soon.",
}

DEFAULT_RESPONSE_KEY = (ResponseIntent.GENERAL, Tone.PROFESSIONAL)
