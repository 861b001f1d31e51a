"""
Pattern library for the conversation engine

Read-only configuration: every category owns an ordered tuple of rules, and
the tiers themselves are ordered by priority. The classifier walks
CLASSIFICATION_TIERS top to bottom and stops at the first rule that matches,
so the order of this table *is* the classification policy.

Crisis indicators are plain substrings and intentionally broad. Sentiment
tiers use word-boundary regexes so short words ("low", "mad") don't fire
inside unrelated words.
"""

import re
from dataclasses import dataclass, field
from typing import Optional, Union

from mindmate.models.conversation import EmotionCategory, ResponseIntent

Route = Union[EmotionCategory, ResponseIntent]


def normalize_text(text) -> str:
    """Lower-case input and fold typographic apostrophes; non-text becomes empty"""
    if not isinstance(text, str):
        return ""
    return text.lower().replace("’", "'").replace("‘", "'").strip()


@dataclass(frozen=True)
class FeatureTopic:
    """A product feature users can ask about by name"""
    key: str
    display_name: str
    pattern: str


@dataclass(frozen=True)
class PatternRule:
    """A single substring or regex test against normalized input"""
    name: str
    kind: str  # 'substring' or 'regex'
    pattern: str
    feature: Optional[FeatureTopic] = None
    _compiled: Optional[re.Pattern] = field(default=None, init=False, repr=False, compare=False)

    def __post_init__(self):
        if self.kind not in ("substring", "regex"):
            raise ValueError(f"Unknown rule kind: {self.kind}")
        if self.kind == "regex":
            object.__setattr__(self, "_compiled", re.compile(self.pattern))

    @classmethod
    def substring(cls, text: str) -> "PatternRule":
        return cls(name=text, kind="substring", pattern=text)

    @classmethod
    def regex(cls, name: str, pattern: str, feature: Optional[FeatureTopic] = None) -> "PatternRule":
        return cls(name=name, kind="regex", pattern=pattern, feature=feature)

    def matches(self, normalized: str) -> bool:
        if self.kind == "substring":
            return self.pattern in normalized
        return self._compiled.search(normalized) is not None


@dataclass(frozen=True)
class ClassificationTier:
    """Rules for one route, in declaration order"""
    route: Route
    rules: tuple[PatternRule, ...]


def _words(*words: str) -> tuple[PatternRule, ...]:
    """Word-boundary regex rule per keyword"""
    return tuple(PatternRule.regex(w, rf"\b{re.escape(w)}\b") for w in words)


def _substrings(*phrases: str) -> tuple[PatternRule, ...]:
    return tuple(PatternRule.substring(p) for p in phrases)


# ==========================================
# Crisis indicators
# ==========================================

CRISIS_INDICATORS: tuple[str, ...] = (
    "suicide",
    "suicidal",
    "kill myself",
    "killing myself",
    "end it all",
    "end my life",
    "ending my life",
    "end my own life",
    "want to end it",
    "going to end it",
    "take my life",
    "take my own life",
    "hurt myself",
    "hurting myself",
    "harm myself",
    "harming myself",
    "self harm",
    "self-harm",
    "selfharm",
    "cut myself",
    "cutting myself",
    "overdose",
    "want to die",
    "wanna die",
    "wish i was dead",
    "wish i were dead",
    "better off dead",
    "better off without me",
    "not worth living",
    "want to live",
    "want to be alive",
    "deserve to live",
    "shouldn't be alive",
    "shouldnt be alive",
    "should not be alive",
    "shouldn't be here",
    "shouldnt be here",
    "want to wake up",
    "no reason to live",
    "nothing to live for",
    "kill me",
    "want to disappear",
    "can't go on",
    "cant go on",
    "no point",
    "give up",
    "nothing matters",
    "worthless",
    "hopeless",
)

CRISIS_RULES: tuple[PatternRule, ...] = _substrings(*CRISIS_INDICATORS)


# ==========================================
# Greeting
# ==========================================

GREETING_RULES: tuple[PatternRule, ...] = (
    PatternRule.regex(
        "bare_greeting",
        r"^(hi+|hello|hey+|heya|hiya|howdy|yo|greetings|good (morning|afternoon|evening))"
        r"( there| mindmate)?[\s!.,?]*$",
    ),
    PatternRule.regex(
        "how_are_you",
        r"^((hi+|hello|hey+)[\s,!]*)?how are you( doing)?( today)?[\s!.?]*$",
    ),
)


# ==========================================
# Product features
# ==========================================

FEATURE_TOPICS: tuple[FeatureTopic, ...] = (
    FeatureTopic("chat", "AI Chat Support", r"\b(ai chat|chatbot|chat)\b"),
    FeatureTopic("mood_tracking", "Mood Tracking", r"\bmood.*\b(tracking|tracker|log)"),
    FeatureTopic("journal", "Private Journaling", r"\b(journal|journaling|journals)\b"),
    FeatureTopic("breathing", "Breathing Games", r"\bbreathing.*\b(games?|exercises?)\b"),
    FeatureTopic("badges", "Achievement Badges", r"\b(badges?|achievements?)\b"),
    FeatureTopic("reminders", "Smart Reminders", r"\breminders?\b"),
    FeatureTopic("progress", "Progress Analytics", r"\bprogress.*\b(tracking|analytics|dashboard)\b"),
    FeatureTopic("crisis_support", "Crisis Support", r"\bcrisis.*\b(support|help|resources)\b"),
)

QUESTION_CUE = (
    r"\b(how (do|does|can|to|would)|what (is|are|does|about)|tell me|explain|show me"
    r"|can you (explain|tell|show)|where (is|are|can|do)|learn (about|more)|info(rmation)? (on|about))\b"
)

FEATURE_RULES: tuple[PatternRule, ...] = tuple(
    PatternRule.regex(f"feature:{topic.key}", rf"{QUESTION_CUE}.*{topic.pattern}", feature=topic)
    for topic in FEATURE_TOPICS
)


# ==========================================
# About the product
# ==========================================

WEBSITE_HELP_RULES: tuple[PatternRule, ...] = (
    PatternRule.regex("what_is_mindmate", r"\bwhat (is|'s) (mindmate|this (app|site|website|place|platform))\b"),
    PatternRule.regex("what_can_you_do", r"\bwhat (can|do) you (do|offer)\b"),
    PatternRule.regex("how_does_it_work", r"\bhow (does|do) (this|mindmate|the (app|site|website)) work\b"),
    PatternRule.regex("how_to_use", r"\bhow (do|can) i use (this|mindmate|the (app|site|website))\b"),
    PatternRule.regex("what_features", r"\bwhat features\b"),
    PatternRule.regex("about_app", r"\babout (this|the) (app|site|website|platform)\b"),
    PatternRule.regex("who_are_you", r"\bwho are you\b"),
)


# ==========================================
# Requests for help
# ==========================================

COPING_RULES: tuple[PatternRule, ...] = _substrings(
    "coping strateg",
    "coping tips",
    "coping skills",
    "coping mechanism",
    "help me cope",
    "how to cope",
    "how can i cope",
    "how do i cope",
    "stress management",
    "manage stress",
    "anxiety tips",
    "depression help",
    "breathing exercise",
    "relaxation technique",
    "mindfulness",
    "meditation",
    "grounding technique",
    "grounding exercise",
    "how can i feel better",
    "how do i feel better",
    "strategies for",
    "techniques for",
    "give me tips",
    "show me ways",
    "teach me how",
    "need tools",
    "calm myself down",
)

SITUATIONAL_RULES: tuple[PatternRule, ...] = _substrings(
    "what should i do",
    "need advice",
    "advice on",
    "advice about",
    "how do i deal with",
    "how to deal with",
    "how do i handle",
    "how to handle",
    "how should i handle",
    "what do i do about",
    "conflict with",
    "argument with",
    "fight with",
    "broke up",
    "breakup",
    "break up with",
    "my boss",
    "my coworker",
    "my roommate",
)

SEEKING_HELP_RULES: tuple[PatternRule, ...] = _substrings(
    "i need help",
    "need some help",
    "help me",
    "can you help",
    "could you help",
    "please help",
    "need support",
    "need someone to talk",
    "someone to talk to",
    "don't know what to do",
    "dont know what to do",
)


# ==========================================
# Sentiment
# ==========================================

DEPRESSION_RULES: tuple[PatternRule, ...] = _words(
    "depressed", "depression", "sad", "sadness", "unhappy", "empty", "lonely",
    "numb", "exhausted", "no energy", "no motivation", "unmotivated", "don't care",
    "feel nothing", "crying", "cry", "tears", "miserable", "heartbroken", "grieving",
    "struggling", "terrible", "awful", "upset", "hurt",
) + (
    PatternRule.regex("feeling_low", r"\bfeel(ing)? (so |really |pretty |kind of |kinda )?(down|low|blue)\b"),
    PatternRule.regex("cant_sleep", r"\bcan'?t sleep\b"),
)

ANXIETY_RULES: tuple[PatternRule, ...] = _words(
    "anxious", "anxiety", "worried", "worry", "worrying", "panic", "panicking",
    "panic attack", "nervous", "scared", "afraid", "fear", "stress", "stressed",
    "stressful", "overwhelmed", "tense", "restless", "on edge", "heart racing",
    "racing thoughts", "jittery", "uneasy", "freaking out", "dread",
) + (
    PatternRule.regex("cant_breathe", r"\bcan'?t breathe\b"),
)

ANGER_RULES: tuple[PatternRule, ...] = _words(
    "angry", "mad", "furious", "rage", "irritated", "frustrated", "frustrating",
    "annoyed", "annoying", "pissed", "hate", "sick of", "fed up", "outraged",
    "livid", "fuming", "resent",
) + (
    PatternRule.regex("cant_stand", r"\bcan'?t stand\b"),
)

POSITIVE_RULES: tuple[PatternRule, ...] = _words(
    "happy", "good", "great", "excellent", "wonderful", "amazing", "fantastic",
    "grateful", "thankful", "blessed", "joy", "joyful", "excited", "love",
    "peaceful", "calm", "content", "accomplished", "proud", "optimistic",
    "hopeful", "cheerful", "delighted", "thrilled", "better",
)

GRATITUDE_RULES: tuple[PatternRule, ...] = _words(
    "thank you", "thanks", "thank u", "thx", "ty", "appreciate it", "appreciate you",
    "appreciate that", "cheers",
)

# Asking for practical suggestions inside an emotional message
TIPS_REQUEST = PatternRule.regex(
    "tips_request",
    r"\b(tips?|advice|suggest(ion)?s?|what should i do|what can i do|how to|strategies|coping|ways to|help)\b",
)


# ==========================================
# Priority order (highest first)
# ==========================================

CLASSIFICATION_TIERS: tuple[ClassificationTier, ...] = (
    ClassificationTier(EmotionCategory.CRISIS, CRISIS_RULES),
    ClassificationTier(ResponseIntent.GREETING, GREETING_RULES),
    ClassificationTier(EmotionCategory.SPECIFIC_FEATURE, FEATURE_RULES),
    ClassificationTier(EmotionCategory.WEBSITE_HELP, WEBSITE_HELP_RULES),
    ClassificationTier(EmotionCategory.COPING_STRATEGIES, COPING_RULES),
    ClassificationTier(EmotionCategory.SITUATIONAL_HELP, SITUATIONAL_RULES),
    ClassificationTier(EmotionCategory.SEEKING_HELP, SEEKING_HELP_RULES),
    ClassificationTier(EmotionCategory.DEPRESSION, DEPRESSION_RULES),
    ClassificationTier(EmotionCategory.ANXIETY, ANXIETY_RULES),
    ClassificationTier(EmotionCategory.ANGER, ANGER_RULES),
    ClassificationTier(EmotionCategory.POSITIVE, POSITIVE_RULES),
    ClassificationTier(ResponseIntent.GRATITUDE, GRATITUDE_RULES),
)

FALLBACK_CATEGORY = EmotionCategory.NEUTRAL


def tier_order() -> list[Route]:
    """Routes in priority order, fallback last"""
    return [tier.route for tier in CLASSIFICATION_TIERS] + [FALLBACK_CATEGORY]
