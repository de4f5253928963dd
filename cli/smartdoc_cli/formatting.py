from __future__ import annotations

from datetime import datetime, timezone

_RISK_STYLES = {
    "low risk": "green",
    "medium risk": "dark_orange",
    "high risk": "red",
}
_RISK_EMOJI = {
    "low risk": "✅",
    "medium risk": "⚠️",
    "high risk": "🚨",
}
_SENTIMENT_STYLES = {
    "positive": "green",
    "negative": "red",
    "neutral": "grey50",
}
_SENTIMENT_EMOJI = {
    "positive": "😊",
    "negative": "😞",
    "neutral": "😐",
}


def format_date(value: datetime | str | None) -> str:
    if value is None or value == "":
        return "-"
    if isinstance(value, datetime):
        dt = value
    else:
        text = str(value)
        try:
            dt = datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError:
            return text
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.strftime("%d %B %Y, %H:%M")


def risk_style(level: str | None) -> str:
    return _RISK_STYLES.get((level or "").strip().lower(), "grey50")


def risk_emoji(level: str | None) -> str:
    return _RISK_EMOJI.get((level or "").strip().lower(), "❓")


def sentiment_style(sentiment: str | None) -> str:
    return _SENTIMENT_STYLES.get((sentiment or "").strip().lower(), "grey50")


def sentiment_emoji(sentiment: str | None) -> str:
    return _SENTIMENT_EMOJI.get((sentiment or "").strip().lower(), "🤔")


def format_currency(amount: float | int | None) -> str:
    if amount is None:
        return "-"
    sign = "-" if amount < 0 else ""
    return f"{sign}R {abs(float(amount)):,.2f}".replace(",", " ")


def truncate_text(text: str | None, max_length: int) -> str:
    text = text or ""
    if len(text) <= max_length:
        return text
    return text[:max_length] + "..."
