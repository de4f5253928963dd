from __future__ import annotations

import math
from typing import Any

from rich.table import Table

from . import console
from .formatting import (
    format_currency,
    format_date,
    risk_emoji,
    risk_style,
    sentiment_emoji,
    sentiment_style,
    truncate_text,
)


def _dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _list(value: Any) -> list[Any]:
    return value if isinstance(value, list) else []


def _number(value: Any) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0


def _rand_amount(amount: Any, currency: Any) -> str:
    """Format rand amounts; anything else is shown as the backend sent it."""
    if str(currency or "").strip().upper() not in {"ZAR", "R"}:
        return str(amount if amount is not None else "-")
    text = str(amount if amount is not None else "").strip()
    if text[:1] in {"R", "r"}:
        text = text[1:]
    try:
        return format_currency(float(text.replace(",", "").replace(" ", "")))
    except ValueError:
        return str(amount if amount is not None else "-")


def render_basic_stats(stats: dict[str, Any]) -> None:
    table = Table(title="Text statistics", show_header=False)
    table.add_column("Metric")
    table.add_column("Value", justify="right")
    for key in (
            "word_count",
            "sentence_count",
            "character_count",
            "average_word_length",
            "average_sentence_length",
    ):
        if key in stats:
            table.add_row(key.replace("_", " ").capitalize(), str(stats[key]))
    console.print(table)


def render_sentiment(sentiment: dict[str, Any], readability: dict[str, Any]) -> None:
    label = str(sentiment.get("sentiment") or "unknown")
    console.print(
        f"Sentiment: [{sentiment_style(label)}]{sentiment_emoji(label)} {label}[/] "
        f"(polarity {sentiment.get('polarity', '-')}, subjectivity {sentiment.get('subjectivity', '-')})"
    )
    if readability:
        console.print(
            f"Readability: {readability.get('readability_level', '-')} "
            f"(Flesch {readability.get('flesch_reading_ease', '-')})"
        )


def render_keywords(keywords: list[Any]) -> None:
    if not keywords:
        return
    words = [f"{k.get('word')} ({k.get('frequency')})" for k in keywords if isinstance(k, dict)]
    console.print("Top keywords: " + ", ".join(words))


def render_text_analysis(result: dict[str, Any]) -> None:
    render_basic_stats(_dict(result.get("basic_stats")))
    render_sentiment(_dict(result.get("sentiment")), _dict(result.get("readability")))
    render_keywords(_list(result.get("top_keywords")))


def render_feedback(result: dict[str, Any]) -> None:
    render_sentiment(_dict(result.get("sentiment")), _dict(result.get("readability")))
    if "word_count" in result:
        console.print(f"Words: {result['word_count']}")
    points = _list(result.get("key_points"))
    if points:
        console.rule("Key points")
        for point in points:
            console.print(f"- {point}")


def render_legal(result: dict[str, Any]) -> None:
    info = _dict(result.get("document_info"))
    console.rule(str(info.get("document_type") or "Document").replace("_", " ").title())
    if info.get("analysis_date"):
        console.print(f"Analyzed: {format_date(info.get('analysis_date'))}")

    risk = _dict(result.get("risk_assessment"))
    if risk:
        level = str(risk.get("risk_level") or "")
        console.print(
            f"Risk: [{risk_style(level)}]{risk_emoji(level)} {level or 'Unknown'}[/] "
            f"(score {risk.get('risk_score', '-')}, "
            f"{risk.get('high_risk_terms_found', 0)} high / {risk.get('medium_risk_terms_found', 0)} medium terms)"
        )

    parties = _list(result.get("parties"))
    if parties:
        table = Table(title="Parties")
        table.add_column("Name")
        table.add_column("Type")
        table.add_column("Role")
        for p in parties:
            p = _dict(p)
            table.add_row(str(p.get("name", "-")), str(p.get("type", "-")), str(p.get("role", "-")))
        console.print(table)

    dates = _list(result.get("key_dates"))
    if dates:
        table = Table(title="Key dates")
        table.add_column("Date")
        table.add_column("Context")
        for d in dates:
            d = _dict(d)
            table.add_row(str(d.get("date", "-")), truncate_text(str(d.get("context") or ""), 60))
        console.print(table)

    amounts = _list(result.get("monetary_amounts"))
    if amounts:
        table = Table(title="Monetary amounts")
        table.add_column("Amount", justify="right", no_wrap=True)
        table.add_column("Currency")
        table.add_column("Context")
        for a in amounts:
            a = _dict(a)
            table.add_row(
                _rand_amount(a.get("amount"), a.get("currency")),
                str(a.get("currency", "-")),
                truncate_text(str(a.get("context") or ""), 60),
            )
        console.print(table)

    clauses = _dict(result.get("identified_clauses"))
    if clauses:
        table = Table(title="Clauses")
        table.add_column("Clause")
        table.add_column("Mentions", justify="right")
        for name, count in clauses.items():
            table.add_row(str(name).replace("_", " "), str(count))
        console.print(table)

    text_stats = _dict(result.get("text_statistics"))
    if text_stats:
        render_text_analysis(text_stats)


def render_stats(result: dict[str, Any]) -> None:
    stats = _dict(result.get("stats")) or result
    if result.get("is_demo"):
        console.warn("Statistics service unavailable; showing demo data.")
    table = Table(title="Usage", show_header=False)
    table.add_column("Metric")
    table.add_column("Value", justify="right")
    table.add_row("Documents processed", str(stats.get("total_documents", 0)))
    table.add_row("Analyses", str(stats.get("total_analyses", 0)))
    table.add_row("Average risk score", f"{round(_number(stats.get('avg_risk_score')))}%")
    console.print(table)


def render_history(result: dict[str, Any]) -> None:
    analyses = _list(result.get("analyses") or result.get("items"))
    if not analyses:
        console.info("No analysis history yet.")
        return
    table = Table(title="Recent analyses")
    table.add_column("ID")
    table.add_column("Type")
    table.add_column("Document")
    table.add_column("Created")
    for item in analyses:
        item = _dict(item)
        table.add_row(
            str(item.get("id", "-")),
            str(item.get("analysis_type") or item.get("type") or "-"),
            truncate_text(str(item.get("filename") or item.get("title") or "-"), 40),
            format_date(item.get("created_at")),
        )
    console.print(table)


def render_samples(result: dict[str, Any]) -> None:
    docs = _list(result.get("documents") or result.get("items"))
    table = Table(title=f"Sample documents ({result.get('count', len(docs))})")
    table.add_column("Key")
    table.add_column("Title")
    table.add_column("Type")
    table.add_column("Description")
    for d in docs:
        d = _dict(d)
        table.add_row(
            str(d.get("key", "-")),
            str(d.get("title", "-")),
            str(d.get("type", "-")),
            truncate_text(str(d.get("description") or ""), 50),
        )
    console.print(table)
