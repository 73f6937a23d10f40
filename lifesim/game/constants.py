"""Константы оформления."""

EMOJI_PROFILE = "👤"
EMOJI_AGE = "🎂"
EMOJI_COIN = "💵"
EMOJI_HAPPY = "😊"
EMOJI_HEART = "❤️"
EMOJI_SMARTS = "🧠"
EMOJI_LOOKS = "✨"
EMOJI_FAME = "🌟"
EMOJI_JOB = "💼"
EMOJI_REPUTATION = "📈"
EMOJI_FAMILY = "👪"
EMOJI_EVENT = "📜"
EMOJI_ACTIVITY = "🎯"
EMOJI_YOUTUBE = "📺"
EMOJI_TIKTOK = "🎵"
EMOJI_ASSET = "🏠"

STAT_LABELS = {
    "happiness": (EMOJI_HAPPY, "Счастье"),
    "health": (EMOJI_HEART, "Здоровье"),
    "smarts": (EMOJI_SMARTS, "Интеллект"),
    "looks": (EMOJI_LOOKS, "Внешность"),
    "fame": (EMOJI_FAME, "Слава"),
    "bank_balance": (EMOJI_COIN, "Баланс"),
    "job_reputation": (EMOJI_REPUTATION, "Репутация"),
    "salary": (EMOJI_JOB, "Зарплата"),
    "youtube_followers": (EMOJI_YOUTUBE, "YouTube"),
    "tiktok_followers": (EMOJI_TIKTOK, "TikTok"),
}

RELATIONSHIP_LABELS = {
    "parent": "Родитель",
    "sibling": "Брат/сестра",
    "spouse": "Супруг(а)",
    "child": "Ребёнок",
    "friend": "Друг",
}

EMBED_SPACER = "\u2003"

__all__ = [name for name in globals().keys() if name.startswith("EMOJI_")] + [
    "STAT_LABELS",
    "RELATIONSHIP_LABELS",
    "EMBED_SPACER",
]
