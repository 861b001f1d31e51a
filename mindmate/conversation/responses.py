"""
Response generator

Maps a Classification to a primary reply and an optional follow-up. Pure
given the random source: no I/O, no state between calls. Every pool is an
immutable tuple and selection is uniform per call.
"""

import logging
import random
from types import MappingProxyType
from typing import Mapping, Optional

from mindmate.conversation.classifier import Classification, classify_message
from mindmate.conversation.crisis import CRISIS_FOLLOW_UP, CRISIS_RESPONSE
from mindmate.models.conversation import BotReply, EmotionCategory, ResponseIntent

logger = logging.getLogger(__name__)


# ==========================================
# Primary pools
# ==========================================

GREETING_RESPONSES = (
    "Hi there! 🌸 I'm MindMate, and I'm really glad you're here. This is your safe space to share "
    "whatever is on your mind.\n\nHow are you feeling today?",
    "Hello! 🌟 Welcome back. I'm here to listen, support you, or just keep you company.\n\n"
    "What would you like to talk about today?",
    "Hey! 💙 It's good to see you. However your day is going, I'm here for you.\n\n"
    "How are you doing right now?",
)

GRATITUDE_RESPONSES = (
    "You're so welcome! 💜 I'm always here whenever you want to talk.",
    "Thank you for saying that. 🌸 It means a lot to be able to support you. Is there anything else on your mind?",
    "Anytime! 🌟 Taking time to care for yourself is something to be proud of.",
)

WEBSITE_HELP_RESPONSE = (
    "I'm so glad you asked! 😊 Welcome to **MindMate**, your mental wellness companion!\n\n"
    "**🌟 Core Features:**\n"
    "💬 **AI Chat Support**: I'm here 24/7 to listen and offer personalized guidance\n"
    "📊 **Mood Tracking**: Monitor your emotional patterns over time\n"
    "📝 **Private Journaling**: A secure space for your thoughts, with a lock for extra privacy\n"
    "📈 **Progress Analytics**: Visual insights into your wellness journey\n"
    "🏆 **Achievement Badges**: Celebrate your self-care milestones\n"
    "⏰ **Smart Reminders**: Gentle nudges for check-ins and self-care\n"
    "🆘 **Crisis Support**: Immediate access to professional help resources\n"
    "🎮 **Breathing Games**: Interactive relaxation exercises\n\n"
    "Just talk to me naturally! Share your feelings, ask for coping strategies, or tell me about your day.\n\n"
    "*Tip: try asking \"How does mood tracking work?\" or \"Tell me about breathing games\".*"
)

COPING_STRATEGY_RESPONSES = (
    "I'd love to share some effective coping strategies with you!\n\n"
    "🌬️ **Breathing:** Box breathing, in for 4, hold for 4, out for 4, hold for 4\n"
    "🧠 **Grounding (5-4-3-2-1):** 5 things you see, 4 you can touch, 3 you hear, 2 you smell, 1 you taste\n"
    "💪 **Physical release:** Progressive muscle relaxation, gentle stretching or a short walk\n"
    "🎵 **Sensory comfort:** Calming music, a warm shower, a soft blanket or a cup of tea\n\n"
    "Which of these resonates with you? I can guide you through any of them.",
    "Here are some coping strategies for different situations:\n\n"
    "🌟 **For stress:** Time-block your tasks and take short breathing breaks\n"
    "💙 **For anxiety:** Ask 'Is this likely? Can I control it?' and focus on what you can control right now\n"
    "🌱 **For low mood:** Small accomplishments, connecting with one person, a little sunlight\n"
    "🔥 **For anger:** Pause before reacting, then release the energy with movement or writing\n\n"
    "What specific situation would you like help with?",
    "Here are some quick daily coping tools:\n\n"
    "⏰ **Morning reset:** 3 deep breaths and one small intention\n"
    "🌟 **Midday check-in:** How am I feeling? What do I need right now?\n"
    "🌙 **Evening wind-down:** What went well today? What can I let go of?\n"
    "🆘 **Emergency toolkit:** Cold water on your wrists, text a trusted friend, or try MindMate's breathing games\n\n"
    "Would you like me to walk you through any of these step by step?",
)

SITUATIONAL_RESPONSES = (
    "I'm here to help you work through whatever you're facing. 🤝\n\n"
    "**Let's break this down together:**\n"
    "• What's the main issue you're dealing with?\n"
    "• Which part feels most stressful?\n"
    "• What would a good outcome look like for you?\n"
    "• What support do you have available?\n\n"
    "Sometimes talking a situation through helps new options appear. What's going on?",
    "It sounds like you're navigating something challenging. 💪 That takes courage.\n\n"
    "1️⃣ **Clarify** what exactly is happening\n"
    "2️⃣ **Identify** what's within your control\n"
    "3️⃣ **Explore** the approaches you could try\n"
    "4️⃣ **Consider** who could support you\n"
    "5️⃣ **Take one small step** today\n\n"
    "You don't have to solve everything at once. What would you like to talk through?",
    "Seeking guidance shows real strength. 🌟 I can help with things like work or school stress, "
    "relationships, family dynamics, big decisions and setting boundaries.\n\n"
    "What situation would you like to explore together?",
)

SEEKING_HELP_RESPONSES = (
    "I'm really glad you're reaching out. That takes courage. 💜 I'm here to help and support you however I can.\n\n"
    "What's going on that you'd like some guidance with?",
    "Thank you for coming to me for help. 🌟 I'm here for you.\n\n"
    "What would be most helpful right now: listening, some support, or thinking something through together?",
)

DEPRESSION_RESPONSES = (
    "I can hear that you're going through a tough time right now. 💙 It takes courage to share that, "
    "and your feelings are completely valid.\n\nWhat's been weighing on your mind the most?",
    "Thank you for trusting me with how you're feeling. 🌸 It sounds like things feel really heavy right now, "
    "and you don't have to carry this alone.\n\nWould you like to tell me more about what's going on?",
)

DEPRESSION_TIPS = (
    "Here are some gentle things that might help a little:\n\n"
    "🌅 **Small steps:** Spend 5 minutes by a window for natural light\n"
    "💧 **Hydrate:** A glass of water can lift your energy\n"
    "🛁 **Comfort:** A warm shower or a soft blanket\n"
    "📞 **Reach out:** Even a short text to someone who cares\n\n"
    "What feels most manageable right now?",
    "Some things that have helped others:\n\n"
    "🎵 **Music:** One song that used to bring you joy\n"
    "🌱 **Nature:** Just 2 minutes outside if you can\n"
    "📝 **Express:** Write down one feeling, no pressure to make it perfect\n"
    "🤗 **Self-compassion:** Talk to yourself like you would to a dear friend\n\n"
    "Which of these resonates with you?",
)

ANXIETY_RESPONSES = (
    "I can sense there's some anxiety in what you're sharing. 💜 Anxiety can feel so overwhelming, "
    "but you're not alone in this.\n\nCan you tell me a bit more about what's making you anxious?",
    "It sounds like you might be feeling anxious or worried about something. 🌊 Those feelings are real "
    "and valid.\n\nWhat's going through your mind right now?",
)

ANXIETY_TIPS = (
    "Here are some techniques for managing anxiety:\n\n"
    "🌬️ **Box breathing:** In for 4, hold for 4, out for 4, hold for 4\n"
    "🏠 **5-4-3-2-1 grounding:** 5 things you see, 4 you touch, 3 you hear, 2 you smell, 1 you taste\n"
    "❄️ **Cold water:** On your wrists or face\n\n"
    "Which one would you like to try first?",
    "Some gentle techniques that can help with anxiety:\n\n"
    "🤲 **Progressive relaxation:** Tense your shoulders for 5 seconds, then release\n"
    "💭 **Grounding thoughts:** 'I am safe right now. This feeling will pass.'\n"
    "🚶 **Movement:** Even gentle stretching helps\n\n"
    "What feels most doable in this moment?",
)

ANGER_RESPONSES = (
    "I can feel the intensity of your emotions. 🔥 Anger often tells us that something we care about "
    "feels threatened or hurt.\n\nWhat's behind this anger?",
    "It sounds like you're feeling really angry about something. 💪 That energy is telling you something "
    "matters to you.\n\nWhat's making you feel this way? Your feelings are valid.",
)

ANGER_TIPS = (
    "Here are some healthy outlets for anger:\n\n"
    "🚶 **Movement:** A quick walk or some jumping jacks\n"
    "📝 **Express:** Write out your feelings, no filter needed\n"
    "🌬️ **Breathe:** 10 deep breaths, focusing on the exhale\n\n"
    "What feels right for you?",
    "Some constructive ways to handle anger:\n\n"
    "⏰ **Pause:** Step away for 10 minutes if you can\n"
    "🎨 **Create:** Draw, write, or make something with your hands\n"
    "💭 **Reframe:** Ask yourself 'What can I control here?'\n\n"
    "Which approach appeals to you most?",
)

POSITIVE_RESPONSES = (
    "It's so wonderful to hear some positivity from you! 🌟 What's bringing you the most joy today?",
    "Your positive energy is contagious! ✨ You deserve these moments of joy.\n\n"
    "Tell me more about what's going well. Celebrating the good times helps us remember them later.",
)

NEUTRAL_RESPONSES = (
    "I'm really glad you're here talking with me. 💙 This is your safe space.\n\n"
    "How are you doing today? What's been on your mind?",
    "Thank you for reaching out. 🌸 Whatever brought you here today, I'm glad you took this step.\n\n"
    "What's going on in your world?",
    "I'm here to meet you wherever you are. 🌟 What would feel most helpful to talk about right now?",
)

FEATURE_FALLBACK_RESPONSE = (
    "I'd be happy to tell you more about that! I can explain chat support, mood tracking, journaling, "
    "breathing games, achievement badges, reminders, progress analytics and crisis support. "
    "Which one would you like to learn about?"
)

FEATURE_RESPONSES: Mapping[str, str] = MappingProxyType({
    "chat": (
        "💬 **AI Chat Support - Your 24/7 Companion**\n\n"
        "I listen without judgment, notice the emotion in your messages and adapt my replies, offer coping "
        "strategies for stress, anxiety, low mood and anger, and share crisis resources immediately when "
        "they're needed. Your conversations are private, and you can start a new chat session any time."
    ),
    "mood_tracking": (
        "📊 **Mood Tracking - Monitor Your Emotional Patterns**\n\n"
        "Rate your mood each day, add optional notes about what influenced it, and watch your trends over "
        "time. Tracking helps you spot triggers, notice progress, and gives you something concrete to "
        "share with a healthcare provider."
    ),
    "journal": (
        "📝 **Private Journaling - Your Secure Digital Diary**\n\n"
        "Write unlimited entries with your own titles, lock entries for extra privacy, and look back on "
        "your growth. Writing things down helps you process emotions and reduce stress."
    ),
    "breathing": (
        "🌬️ **Breathing Games - Interactive Relaxation**\n\n"
        "Follow animated guides for box breathing (4-4-4-4), deep belly breathing, the 4-7-8 technique "
        "and coherent breathing. They're great before stressful events, when you can't sleep, or any "
        "time you want a calmer moment."
    ),
    "badges": (
        "🏆 **Achievement Badges - Celebrate Your Progress**\n\n"
        "Earn badges like First Steps (your first mood entry), Week Tracker (7 mood entries), Thoughtful "
        "Writer (your first journal entry), Journaling Enthusiast (10 entries), Conversation Starter "
        "(25 chat messages), Wellness Warrior (using mood tracking, journaling and chat) and Positive "
        "Vibes (an average mood of 4+ across your last 7 entries)."
    ),
    "reminders": (
        "⏰ **Smart Reminders - Never Miss Your Self-Care**\n\n"
        "Set reminders for mood check-ins, journaling prompts, breathing breaks, gratitude practice or "
        "your own self-care activities, at the times and frequency that suit you."
    ),
    "progress": (
        "📈 **Progress Analytics - Track Your Wellness Journey**\n\n"
        "See your mood trends, journaling consistency, chat activity and badge progress in one place, "
        "so you can discover what helps you feel your best."
    ),
    "crisis_support": (
        "🆘 **Crisis Support - Immediate Help When You Need It Most**\n\n"
        "• National Suicide Prevention Lifeline: **988**\n"
        "• Crisis Text Line: Text HOME to **741741**\n"
        "• Emergency Services: **911**\n\n"
        "I watch for crisis language in every message and share these resources right away. You are not "
        "alone, and help is available 24/7."
    ),
})

FEATURE_FOLLOW_UP_TEMPLATE = "Would you like me to walk you through getting started with {feature}? 😊"


# ==========================================
# Follow-up pools
# ==========================================

COPING_STRATEGY_FOLLOW_UPS = (
    "💡 Coping tip: try box breathing. Breathe in for 4, hold for 4, breathe out for 4, hold for 4, and repeat a few times.",
    "💡 Coping tip: ground yourself with 5-4-3-2-1. Name 5 things you see, 4 you can touch, 3 you hear, 2 you smell and 1 you taste.",
    "💡 Coping tip: write your worries down and circle the ones you can act on today. Let the rest wait.",
    "💡 Coping tip: run cold water over your wrists for 30 seconds. It can help your body settle quickly.",
)

SELF_CARE_FOLLOW_UPS = (
    "🌱 One small thing that might help: drink a glass of water and open a window for a few minutes.",
    "🌱 If you feel up to it, writing a few lines in your journal can make heavy feelings a bit lighter.",
    "🌱 Is there one person you could send a quick message to today? Connection can help, even in small doses.",
)

COOL_DOWN_FOLLOW_UPS = (
    "🌬️ Before reacting, try taking 10 slow breaths and focus on each exhale.",
    "🚶 A short, brisk walk can help your body release some of that energy.",
    "📝 It can help to write out exactly what you'd like to say, without sending it.",
)


PRIMARY_POOLS: Mapping[object, tuple[str, ...]] = MappingProxyType({
    ResponseIntent.GREETING: GREETING_RESPONSES,
    ResponseIntent.GRATITUDE: GRATITUDE_RESPONSES,
    EmotionCategory.CRISIS: (CRISIS_RESPONSE,),
    EmotionCategory.WEBSITE_HELP: (WEBSITE_HELP_RESPONSE,),
    EmotionCategory.COPING_STRATEGIES: COPING_STRATEGY_RESPONSES,
    EmotionCategory.SITUATIONAL_HELP: SITUATIONAL_RESPONSES,
    EmotionCategory.SEEKING_HELP: SEEKING_HELP_RESPONSES,
    EmotionCategory.DEPRESSION: DEPRESSION_RESPONSES,
    EmotionCategory.ANXIETY: ANXIETY_RESPONSES,
    EmotionCategory.ANGER: ANGER_RESPONSES,
    EmotionCategory.POSITIVE: POSITIVE_RESPONSES,
    EmotionCategory.NEUTRAL: NEUTRAL_RESPONSES,
})

# Used instead of the primary pool when the user asks for tips
TIPS_POOLS: Mapping[EmotionCategory, tuple[str, ...]] = MappingProxyType({
    EmotionCategory.DEPRESSION: DEPRESSION_TIPS,
    EmotionCategory.ANXIETY: ANXIETY_TIPS,
    EmotionCategory.ANGER: ANGER_TIPS,
})

FOLLOW_UP_POOLS: Mapping[EmotionCategory, tuple[str, ...]] = MappingProxyType({
    EmotionCategory.CRISIS: (CRISIS_FOLLOW_UP,),
    EmotionCategory.ANXIETY: COPING_STRATEGY_FOLLOW_UPS,
    EmotionCategory.DEPRESSION: SELF_CARE_FOLLOW_UPS,
    EmotionCategory.ANGER: COOL_DOWN_FOLLOW_UPS,
})


def _choose(pool: tuple[str, ...], rng: Optional[random.Random]) -> str:
    return (rng or random).choice(pool)


def generate_response(
    classification: Classification,
    rng: Optional[random.Random] = None
) -> BotReply:
    """
    Build the reply for a classified message

    Args:
        classification: Output of classify_message()
        rng: Random source; module-level random when omitted

    Returns:
        BotReply with a primary response and, for crisis, anxiety,
        depression, anger and feature questions, a follow-up
    """
    category = classification.category

    if classification.intent is not None:
        return BotReply(
            category=category,
            intent=classification.intent,
            primary_response=_choose(PRIMARY_POOLS[classification.intent], rng),
        )

    if category is EmotionCategory.SPECIFIC_FEATURE:
        feature = classification.feature
        if feature is None:
            return BotReply(category=category, primary_response=FEATURE_FALLBACK_RESPONSE)
        return BotReply(
            category=category,
            primary_response=FEATURE_RESPONSES.get(feature.key, FEATURE_FALLBACK_RESPONSE),
            follow_up_response=FEATURE_FOLLOW_UP_TEMPLATE.format(feature=feature.display_name),
        )

    pool = PRIMARY_POOLS[category]
    if classification.asking_for_tips and category in TIPS_POOLS:
        pool = TIPS_POOLS[category]

    follow_up = None
    if category in FOLLOW_UP_POOLS:
        follow_up = _choose(FOLLOW_UP_POOLS[category], rng)

    return BotReply(
        category=category,
        primary_response=_choose(pool, rng),
        follow_up_response=follow_up,
    )


def respond_to(text, rng: Optional[random.Random] = None) -> BotReply:
    """Classify and answer in one step"""
    return generate_response(classify_message(text), rng=rng)
