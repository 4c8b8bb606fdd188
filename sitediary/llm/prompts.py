"""Prompts for diary summaries and text enhancement."""

from __future__ import annotations

from collections.abc import Sequence

from sitediary.diaries.models import DiaryRecord

SUMMARY_SYSTEM_PROMPT = """You are a professional construction site manager assistant. Create clear, well-structured summaries of site diary entries.

Format your response as follows:

📊 OVERVIEW
Brief 1-2 sentence overview of the period

🔨 KEY ACTIVITIES
• Bullet point list of main activities
• Include progress and milestones
• Be specific and concise

🌤️ WEATHER CONDITIONS
• Weather patterns and impact on work
• Any weather-related delays or adjustments

⚠️ SAFETY & OBSERVATIONS
• Safety checks performed
• Issues identified
• Concerns raised

👥 TEAM & ATTENDANCE
• Key personnel involved
• Notable attendees at meetings

Use clear formatting with line breaks between sections. Keep it professional and actionable."""

BEAUTIFY_SYSTEM_PROMPT = """You are a professional writing assistant for construction site documentation. Your task is to:
- Improve grammar, spelling, and punctuation
- Make text more professional and clear
- Maintain the original meaning and intent
- Keep the same tone (formal for reports, casual for notes)
- Ensure proper construction industry terminology
- Keep the response concise and to the point

IMPORTANT: Only return the improved text without any preamble, explanation, or meta-commentary."""


def format_diary(diary: DiaryRecord) -> str:
    weather = (
        f"{diary.weather.temperature}°C, {diary.weather.description}"
        if diary.weather
        else "Weather not recorded"
    )
    attendees = (
        f"Attendees: {', '.join(diary.attendees)}"
        if diary.attendees
        else "No attendees recorded"
    )
    return "\n".join(
        [
            f"Date: {diary.date}",
            f"Title: {diary.title}",
            f"Created By: {diary.created_by}",
            f"Weather: {weather}",
            attendees,
            f"Content: {diary.content or 'No content provided'}",
            "---",
        ]
    )


def build_summary_prompt(diaries: Sequence[DiaryRecord]) -> str:
    entries = "\n".join(format_diary(d) for d in diaries)
    return f"Please provide a well-structured summary of the following site diary entries:\n\n{entries}"


def build_beautify_prompt(text: str) -> str:
    return f"Please improve and enhance this text:\n\n{text}"
