"""
Static rule tables for the local inference engine.

Keywords are matched case-insensitively at the start of a word, so "urgent"
also counts "urgently" while "schedule" does not match inside "reschedule".
Tables are module constants and are never modified at runtime.
"""

from email_automation.models.enums import Category, ResponseIntent


# Category scoring. GENERAL has no keywords: it is the tie/zero fallback.
CATEGORY_KEYWORDS: dict[Category, tuple[str, ...]] = {
    Category.URGENT: ("urgent", "asap", "emergency", "critical", "immediately"),
    Category.SUPPORT: (
        "help", "issue", "problem", "error", "bug", "support", "broken",
        "not working", "troubleshoot", "fix",
    ),
    Category.SALES: (
        "price", "pricing", "quote", "purchase", "buy", "offer", "discount",
        "proposal", "deal", "invoice",
    ),
    Category.MEETING: (
        "meeting", "schedule", "calendar", "appointment", "agenda", "call",
        "conference", "availability",
    ),
    Category.REPORT: (
        "report", "analytics", "metrics", "quarterly", "dashboard", "statistics",
        "results", "figures",
    ),
    Category.COMPLAINT: (
        "complaint", "disappointed", "unhappy", "unacceptable", "refund",
        "terrible", "dissatisfied", "worst",
    ),
}

HIGH_PRIORITY_KEYWORDS: tuple[str, ...] = (
    "urgent", "asap", "immediate", "critical", "emergency", "important",
    "deadline", "today", "right away",
)

LOW_PRIORITY_KEYWORDS: tuple[str, ...] = (
    "fyi", "no rush", "whenever", "low priority", "newsletter",
    "when you have time", "not urgent",
)

POSITIVE_KEYWORDS: tuple[str, ...] = (
    "thank", "great", "excellent", "happy", "appreciate", "love", "pleased",
    "wonderful", "good", "glad", "awesome", "fantastic",
)

NEGATIVE_KEYWORDS: tuple[str, ...] = (
    "disappointed", "angry", "terrible", "bad", "poor", "unacceptable",
    "frustrat", "complaint", "awful", "unhappy", "hate", "worst",
)

# keyword -> urgency bonus; presence based, applied once per keyword
URGENCY_BONUSES: tuple[tuple[str, int], ...] = (
    ("urgent", 3),
    ("asap", 3),
    ("immediate", 2),
    ("deadline", 2),
    ("today", 1),
)
URGENCY_BASELINE = 5
URGENCY_EXCLAMATION_BONUS = 1

# Shout signals for priority
SHOUT_EXCLAMATION_THRESHOLD = 2  # strictly more than this many "!"
SHOUT_CAPS_MIN_LENGTH = 4  # all-caps word longer than three letters

STOP_WORDS: frozenset[str] = frozenset(
    {
        "about", "above", "after", "again", "against", "also", "been", "before",
        "being", "below", "between", "both", "could", "does", "doing", "down",
        "during", "each", "from", "further", "have", "having", "here", "hers",
        "herself", "himself", "into", "itself", "just", "more", "most", "myself",
        "only", "other", "ours", "ourselves", "over", "same", "should", "some",
        "such", "than", "that", "their", "theirs", "them", "themselves", "then",
        "there", "these", "they", "this", "those", "through", "under", "until",
        "very", "were", "what", "when", "where", "which", "while", "whom", "will",
        "with", "would", "your", "yours", "yourself", "yourselves", "dear",
        "hello", "regards", "thanks", "thank", "please", "best", "sincerely",
        "kind", "hope", "well", "know", "need", "want", "like", "let",
    }
)
KEY_TOPIC_MIN_LENGTH = 4  # tokens of three characters or fewer are dropped
KEY_TOPIC_CANDIDATES = 8

ACTION_VERBS: tuple[str, ...] = (
    "please", "send", "review", "schedule", "confirm", "update", "complete",
    "prepare", "submit", "provide", "check", "sign", "approve", "call",
    "follow up", "let me know", "reply", "share",
)
ACTION_ITEM_MAX_LENGTH = 80
ACTION_ITEM_ELLIPSIS = "..."

DEADLINE_KEYWORDS: tuple[str, ...] = (
    "deadline", "due", "by tomorrow", "by end of", "by monday", "by tuesday",
    "by wednesday", "by thursday", "by friday", "eod", "end of day", "today",
)

# Whole-word stop words per non-English language, checked in this order;
# ties resolve to the earlier language.
LANGUAGE_STOP_WORDS: tuple[tuple[str, frozenset[str]], ...] = (
    ("es", frozenset({"el", "los", "las", "que", "por", "para", "una", "usted", "gracias", "hola", "está", "señor"})),
    ("fr", frozenset({"les", "est", "une", "pour", "avec", "merci", "bonjour", "vous", "nous", "sont", "très"})),
    ("de", frozenset({"der", "das", "und", "ist", "nicht", "mit", "ich", "bitte", "danke", "sehr", "haben"})),
    ("it", frozenset({"il", "gli", "che", "della", "sono", "grazie", "ciao", "buongiorno", "questo", "anche"})),
    ("pt", frozenset({"uma", "obrigado", "obrigada", "você", "não", "olá", "muito", "também", "são", "com"})),
)
DEFAULT_LANGUAGE = "en"

# Intent checks: substring containment on lowercased text, first match wins.
INTENT_KEYWORDS: tuple[tuple[ResponseIntent, tuple[str, ...]], ...] = (
    (ResponseIntent.MEETING, ("meeting", "schedule", "calendar", "appointment", "call")),
    (ResponseIntent.THANKS, ("thank", "appreciate", "grateful")),
    (ResponseIntent.QUESTION, ("?", "question", "wondering")),
    (ResponseIntent.REQUEST, ("please", "request", "could you", "would you", "need")),
    (ResponseIntent.COMPLAINT, ("complaint", "disappointed", "unhappy", "problem", "refund")),
)

# Security heuristics: threat kind -> indicator phrases (substring, lowercased)
THREAT_INDICATORS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("phishing", (
        "verify your account", "confirm your identity", "account suspended",
        "account will be closed", "click here to login", "unusual sign-in activity",
    )),
    ("credential_request", (
        "update your password", "login credentials", "your password", "social security number",
        "one-time passcode", "reply with your", "pin number",
    )),
    ("financial_fraud", (
        "wire transfer", "gift card", "bitcoin", "lottery", "inheritance",
        "bank details", "western union",
    )),
    ("spam", (
        "you are a winner", "congratulations you won", "limited time offer",
        "act now", "100% free", "risk free", "click below",
    )),
    ("suspicious_link", (
        "bit.ly/", "tinyurl.com", "goo.gl/", ".exe", ".zip",
        "click the link below",
    )),
)
