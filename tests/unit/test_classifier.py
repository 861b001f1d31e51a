"""Unit tests for the emotion classifier (mindmate/conversation/classifier.py)"""
import pytest

from mindmate.conversation.classifier import Classification, classify_message, detect_emotion
from mindmate.conversation.patterns import CLASSIFICATION_TIERS, tier_order
from mindmate.models.conversation import EmotionCategory, ResponseIntent


# ============================================================================
# Priority order
# ============================================================================

def test_tier_order_is_fixed():
    """Tiers are evaluated highest priority first, neutral last"""
    assert tier_order() == [
        EmotionCategory.CRISIS,
        ResponseIntent.GREETING,
        EmotionCategory.SPECIFIC_FEATURE,
        EmotionCategory.WEBSITE_HELP,
        EmotionCategory.COPING_STRATEGIES,
        EmotionCategory.SITUATIONAL_HELP,
        EmotionCategory.SEEKING_HELP,
        EmotionCategory.DEPRESSION,
        EmotionCategory.ANXIETY,
        EmotionCategory.ANGER,
        EmotionCategory.POSITIVE,
        ResponseIntent.GRATITUDE,
        EmotionCategory.NEUTRAL,
    ]


def test_every_tier_has_rules():
    for tier in CLASSIFICATION_TIERS:
        assert tier.rules, f"{tier.route} has no rules"


@pytest.mark.parametrize("text,expected", [
    # crisis beats everything else in the same message
    ("hi, I want to die", EmotionCategory.CRISIS),
    ("how do I use the journal? I feel hopeless", EmotionCategory.CRISIS),
    ("I'm so angry I want to hurt myself", EmotionCategory.CRISIS),
    ("thanks, but I'm thinking about suicide", EmotionCategory.CRISIS),
    # feature question beats product question and sentiment
    ("How do I use the journal when I'm sad?", EmotionCategory.SPECIFIC_FEATURE),
    # product question beats coping request
    ("What can you do? I need coping strategies", EmotionCategory.WEBSITE_HELP),
    # coping beats situational
    ("what should i do, I need coping strategies", EmotionCategory.COPING_STRATEGIES),
    # situational beats seeking help
    ("I need help, what should I do about my boss", EmotionCategory.SITUATIONAL_HELP),
    # seeking help beats depression
    ("I'm so sad, can you help", EmotionCategory.SEEKING_HELP),
    # depression beats anxiety
    ("I'm sad and anxious", EmotionCategory.DEPRESSION),
    # anxiety beats anger
    ("I'm stressed and angry", EmotionCategory.ANXIETY),
    # anger beats positive
    ("I'm angry but I love my dog", EmotionCategory.ANGER),
    # positive beats gratitude
    ("thanks, I feel great", EmotionCategory.POSITIVE),
])
def test_adjacent_tiers_resolve_to_higher_priority(text, expected):
    """A message matching two tiers lands in the higher one only"""
    assert detect_emotion(text) == expected


# ============================================================================
# Crisis
# ============================================================================

@pytest.mark.parametrize("text", [
    "I want to kill myself",
    "There's no point anymore",
    "I feel WORTHLESS",
    "I can’t go on like this",
])
def test_crisis_messages(text):
    result = classify_message(text)
    assert result.category == EmotionCategory.CRISIS
    assert result.is_crisis
    assert result.intent is None


# ============================================================================
# Greeting and gratitude intents
# ============================================================================

@pytest.mark.parametrize("text", ["", "   ", None, 42])
def test_empty_or_non_text_input_is_greeting(text):
    result = classify_message(text)
    assert result.intent == ResponseIntent.GREETING
    assert result.category == EmotionCategory.NEUTRAL
    assert result.matched_rule == "empty_input"


@pytest.mark.parametrize("text", ["Hi", "hello!", "Hey there", "good morning", "how are you?"])
def test_bare_greetings(text):
    result = classify_message(text)
    assert result.intent == ResponseIntent.GREETING


def test_greeting_followed_by_content_is_classified_by_content():
    """Only a bare greeting is a greeting; anything after it decides the category"""
    result = classify_message("hey, I've been feeling really anxious lately")
    assert result.intent is None
    assert result.category == EmotionCategory.ANXIETY


@pytest.mark.parametrize("text", ["thank you", "Thanks!", "I appreciate it"])
def test_gratitude(text):
    result = classify_message(text)
    assert result.intent == ResponseIntent.GRATITUDE
    assert result.category == EmotionCategory.POSITIVE


# ============================================================================
# Categories
# ============================================================================

def test_anxiety_about_exam():
    result = classify_message("I feel really anxious about my exam")
    assert result.category == EmotionCategory.ANXIETY
    assert result.asking_for_tips is False


def test_feature_question_carries_feature():
    result = classify_message("How do I use the journal when I'm sad?")
    assert result.category == EmotionCategory.SPECIFIC_FEATURE
    assert result.feature is not None
    assert result.feature.key == "journal"
    assert result.feature.display_name == "Private Journaling"
    assert result.matched_rule == "feature:journal"


def test_feature_name_without_question_is_not_feature_question():
    assert detect_emotion("I wrote in my journal today and feel happy") == EmotionCategory.POSITIVE


@pytest.mark.parametrize("text,expected", [
    ("What is MindMate?", EmotionCategory.WEBSITE_HELP),
    ("Can you teach me some mindfulness?", EmotionCategory.COPING_STRATEGIES),
    ("I had a fight with my sister", EmotionCategory.SITUATIONAL_HELP),
    ("I need someone to talk to", EmotionCategory.SEEKING_HELP),
    ("I've been feeling so down lately", EmotionCategory.DEPRESSION),
    ("My heart is racing and I'm nervous", EmotionCategory.ANXIETY),
    ("I'm so frustrated with everything", EmotionCategory.ANGER),
    ("Today was a wonderful day", EmotionCategory.POSITIVE),
])
def test_single_tier_messages(text, expected):
    assert detect_emotion(text) == expected


def test_word_boundaries_prevent_partial_matches():
    """'mad' must not fire inside 'made', 'sad' not inside 'crusade'"""
    assert detect_emotion("I made a sandwich for the crusade") == EmotionCategory.NEUTRAL


def test_asking_for_tips_flag():
    result = classify_message("I'm so anxious, any tips?")
    assert result.category == EmotionCategory.ANXIETY
    assert result.asking_for_tips is True


# ============================================================================
# Totality
# ============================================================================

@pytest.mark.parametrize("text", [
    "The weather is cloudy",
    "asdfghjkl",
    "12345",
    "🙂",
    "a" * 5000,
])
def test_unmatched_input_falls_back_to_neutral(text):
    result = classify_message(text)
    assert result.category == EmotionCategory.NEUTRAL
    assert result.intent is None
    assert result.matched_rule is None


def test_classification_is_deterministic():
    text = "I'm worried and can't sleep"
    assert classify_message(text) == classify_message(text)
    assert isinstance(classify_message(text), Classification)
