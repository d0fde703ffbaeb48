"""
Prompt templates for the learning use cases.

Prompts describe the content only; output shape is enforced separately by the
schema attached to each request.
"""

from typing import Sequence


def _bullets(items: Sequence[str]) -> str:
    return "\n".join(f"    - {item}" for item in items)


def build_quiz_prompt(grade: str, subject: str, count: int,
                      weak_topics: Sequence[str] = (), focus_topics: Sequence[str] = (),
                      remediation: bool = False) -> str:
    focus = ""
    if focus_topics:
        focus = f"""
    The questions should cover a range of the following topics, ensuring variety:
{_bullets(focus_topics)}
"""

    if remediation:
        adaptive = f"""
    REMEDIATION SESSION:
    Every question must target one of the student's weak topics listed below. Rephrase the
    concept or ask it from a new angle so the student can understand it differently.
    Weak Topics: {', '.join(weak_topics) if weak_topics else 'None'}
"""
    else:
        adaptive = f"""
    ADAPTIVE LEARNING INSTRUCTIONS:
    A list of the student's weak topics is provided below. Focus a higher proportion of the
    questions (around 60-70%) on these topics, using rephrased or different styles of questions.
    Weak Topics: {', '.join(weak_topics) if weak_topics else 'None'}
"""

    return f"""
    Generate a new and unique {count}-question multiple-choice quiz for a {grade} student studying {subject}.
    The curriculum is the CAPS South African curriculum.
    The difficulty of the questions should be varied, from very easy to very hard, to properly assess the student's knowledge.
    Each question must have 4 options, and one correct answer must be specified.
    Each question must be assigned a specific curriculum topic.
{focus}{adaptive}
    Ensure the questions are appropriate for {grade}, are worded differently from previous requests, and are clear and unambiguous.
"""


def build_flashcard_prompt(grade: str, subject: str, difficulty: str, count: int) -> str:
    return f"""
    Create {count} study flashcards for a {grade} student studying {subject} (CAPS South African curriculum).
    Difficulty level: {difficulty}.
    Each flashcard has a short key term and a clear, age-appropriate definition.
    Where it helps self-testing, include an "options" list of 4 plausible definitions, one of which is the correct definition verbatim.
    Do not repeat terms.
"""


def build_review_prompt(grade: str, subject: str, incorrect: Sequence[dict]) -> str:
    items = "".join(
        f"""
      Item {i}:
      - Question: "{item['question']}"
      - Their Answer: "{item['userAnswer']}"
      - Correct Answer: "{item['correctAnswer']}"
"""
        for i, item in enumerate(incorrect, start=1)
    )
    return f"""
    A {grade} student has just completed a {subject} quiz and answered the following questions incorrectly.
    For each question, generate a clear, simple, and encouraging explanation of why the correct answer is right.
    The explanation should be easy for a {grade} student to understand. The goal is to help them learn from their mistakes.
    Return one entry per item with the original question, the student's answer, the correct answer, and your explanation.

    Here are the questions they got wrong:
{items}"""
