"""Prompt contract for extracting timeblocks from weekly timetables."""

from __future__ import annotations

import structlog

logger = structlog.get_logger()

PROMPT_VERSION = "timetable-extract-v3"

SYSTEM_PROMPT = (
    "You are an expert at extracting structured timetable data from various formats.\n"
    "Your task is to identify timeblocks with their days, times, and event names.\n"
    "Always return valid JSON with no additional formatting or explanation."
)

INTERPRETATION_RULES = """\
### CRITICAL INSTRUCTION: MATRIX & LOCKED BLOCKS
1. **Matrix Layout**: Treat the document as a grid. Time slots often appear as column headers on top.
   These times apply to ALL days (rows) below them unless a specific cell says otherwise.
2. **Locked Blocks (Recurring Events)**: Look for shaded blocks or vertical text that spans across all days
   (or appears to be a divider), e.g. "Registration and Early Morning Work", "Break", "Lunch", "Daily routine".
   - If you see such a block (e.g. "Break" at 10:20-10:35), you MUST generate a separate timeblock for EVERY
     day it applies to. Do not list it once.
3. **Header-Based Timing**:
   - If the TOP ROW contains times (e.g. "8:40", "9:00", "9:15-10:45"), they define the time slots of the columns below.
   - An event in a cell (e.g. "Maths" in the Monday row under "9:15-10:45") happens at that column's time.
   - If a header shows only a START time, the END time is the START time of the NEXT column
     ("8:40" followed by "9:00" means 08:40 to 09:00).
   - The LAST column must still get an end time. Never leave it undefined; estimate the duration from the event name:
     dismissal / pack up: 5-15 minutes; reading / jobs / fitness: 30 minutes; lunch / recess: 30 minutes; anything else: 30 minutes.
   - If a header already shows a range, use it directly.
4. **Cell Overrides**: A time range written inside a cell ("9:30 - 10:00 Phonics" or "9:30-10:00 Phonics") takes
   absolute precedence over the column header.
5. **Multiple Subjects In One Cell (Time Splitting)**:
   - If a cell names several activities for one slot, split the slot into equal parts, rounded to the nearest minute.
   - Example: 9:00-10:15 is 75 minutes. With 2 subjects: 09:00-09:38 and 09:38-10:15.
   - The last subject must end exactly at the slot's end time. Create a SEPARATE timeblock for each subject.
6. **Multi-Day Columns**: If one column header names several days (e.g. "Monday, Tuesday, Thursday"), duplicate
   every event in that column for each named day.
7. **Sparse Timetables**: Only extract cells with actual text. Empty cells produce no timeblock. Never invent events.

### Extraction Rules:
- **Day of the week**: Monday-Sunday, written in full. Sources may abbreviate (M, Tu, W, Th, F, Sa, Su or Mon, Tue, ...).
- **Time**: 24-hour HH:MM for both start_time and end_time.
- **Event Name**: Keep the exact wording from the document ("Maths", "RWI", "Reading books and register").
  NEVER use generic placeholders such as "Unknown Event", "Event", "Activity" or "Lesson".
- **Notes**: Any extra information in the cell (room, teacher, "Intervention folders"), or null.
- **Confidence**: A number between 0 and 1.
"""

OUTPUT_EXAMPLE = """\
{
  "timeblocks": [
    {
      "day": "Monday",
      "event_name": "Reading books and register",
      "start_time": "08:40",
      "end_time": "09:00",
      "notes": "Daily routine",
      "confidence": 0.95
    },
    {
      "day": "Tuesday",
      "event_name": "RWI",
      "start_time": "09:00",
      "end_time": "09:38",
      "notes": "Split from 9:00-10:15 slot (2 subjects)",
      "confidence": 0.9
    },
    {
      "day": "Tuesday",
      "event_name": "Play (Observation)",
      "start_time": "09:38",
      "end_time": "10:15",
      "notes": "Split from 9:00-10:15 slot (2 subjects)",
      "confidence": 0.9
    }
  ],
  "metadata": {
    "total_events": 3,
    "days_covered": ["Monday", "Tuesday"],
    "extraction_notes": "Detected locked blocks for Break and Lunch. Used header-based timing. Split multi-subject cells."
  }
}
"""

CHECKLIST = """\
### Final Checklist:
- Did you expand locked blocks (Break / Lunch / Registration / Daily routine) for ALL days where they apply?
- Did you use the COLUMN HEADER times unless a cell gives its own time range?
- Did you give every event, including the last column, an end time?
- Did you expand abbreviated day names (M=Monday, Tu=Tuesday, W=Wednesday, Th=Thursday, F=Friday)?
- Did you SPLIT slots containing several subjects?
- Did you skip empty cells rather than inventing events?
- The root object MUST contain a "timeblocks" array. Return ONLY valid JSON. No markdown. No code fences.
"""


def build_text_prompt(text: str, *, max_chars: int = 20_000) -> str:
    """Build the text-mode prompt around text extracted from a PDF/DOCX.

    Args:
        text: Plain text of the timetable document.
        max_chars: Upper bound on embedded source text.

    Returns:
        Prompt string.
    """

    text = (text or "").strip()
    if len(text) > max_chars:
        logger.warning("source_text_truncated", original_length=len(text), kept_length=max_chars)
        text = text[:max_chars]

    return (
        "Extract all timetable events from the document text below.\n\n"
        f"{INTERPRETATION_RULES}\n"
        "### Document Text:\n"
        "---\n"
        f"{text}\n"
        "---\n\n"
        "### Return JSON Structure:\n"
        f"{OUTPUT_EXAMPLE}\n"
        f"{CHECKLIST}"
    )


def build_image_prompt() -> str:
    """Build the image-mode prompt sent alongside a timetable image or PDF."""

    return (
        "Analyze the attached timetable document/image. It is a visual grid of a teacher's week.\n"
        "Extract the schedule into the JSON format specified below.\n\n"
        f"{INTERPRETATION_RULES}\n"
        "### Return JSON Structure:\n"
        f"{OUTPUT_EXAMPLE}\n"
        f"{CHECKLIST}"
    )
