from __future__ import annotations  # Interviewer prompt construction

from textwrap import dedent
from typing import Optional, Sequence

from .models import Turn

SYSTEM_PROMPT = dedent(
    """
    You are a professional AI interviewer.

    Your job is to run an interview that follows a list of questions in a fixed order.

    Rules:
    - Speak one turn at a time.
    - Follow the order of the script.
    - Always acknowledge or briefly summarize what the interviewee just said before moving on.
    - Keep a warm, curious and professional tone.
    - Keep replies short (at most 3 sentences).
    - If no questions remain in the script, thank the interviewee, close the interview and do not open new topics.
    """
).strip()

SPEAKER_LABELS = {"interviewer": "Interviewer", "candidate": "Candidate"}


def opening_line(greeting: str, first_question: str) -> str:  # Greeting followed by the first scripted question
    return f"{greeting.strip()} {first_question.strip()}".strip()


def render_transcript(turns: Sequence[Turn]) -> str:  # One labelled line per turn
    return "\n".join(f"{SPEAKER_LABELS[turn.speaker]}: {turn.text}" for turn in turns)


def build_turn_prompt(
    *,
    objective: str,
    tone: str,
    current_question: Optional[str],
    next_question: Optional[str],
    transcript: str,
) -> str:  # User prompt asking for the next interviewer utterance
    current = f'"{current_question}"' if current_question else "(no question left in the script)"
    upcoming = (
        f'Next question in the script: "{next_question}"'
        if next_question
        else "There are no more questions in the script."
    )
    return "\n".join(
        [
            f"Interview objective: {objective}",
            f"Desired tone: {tone}",
            "",
            "Current question in the script:",
            current,
            "",
            upcoming,
            "",
            "Conversation so far (Interviewer = AI, Candidate = human):",
            transcript,
            "",
            "Instructions for your next reply:",
            "- Briefly acknowledge or summarize what the candidate just said.",
            "- If you have not yet asked the current scripted question, ask it now.",
            "- If it has been answered, bridge naturally to the NEXT scripted question (if there is one).",
            "- If there are NO more questions, thank the candidate and close the interview in 2-3 sentences without opening new topics.",
            "- No more than 3 sentences in total.",
            "- Keep a warm, human and professional tone.",
        ]
    )
