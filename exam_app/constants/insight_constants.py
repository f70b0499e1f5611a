"""Thresholds, labels and study resources used by the insight synthesizer."""

from exam_app.core.models import SkillType

STRENGTH_THRESHOLD: float = 70.0
WEAKNESS_THRESHOLD: float = 50.0

SKILL_EXCELLENT_THRESHOLD: float = 70.0
SKILL_GOOD_THRESHOLD: float = 50.0

EXCELLENT_SCORE_BAND: float = 80.0
GOOD_SCORE_BAND: float = 60.0

FAST_PACE_SECONDS: float = 20.0
SLOW_PACE_SECONDS: float = 60.0

# Predicted next score: +5 above the good band, +10 below it, capped at 100.
IMPROVEMENT_BONUS_HIGH: float = 5.0
IMPROVEMENT_BONUS_LOW: float = 10.0
MAX_SCORE: float = 100.0

MATERIALS_PER_WEAK_CATEGORY: int = 2

SKILL_LABELS: dict[SkillType, str] = {
    SkillType.THEORETICAL: "Theoretical Knowledge",
    SkillType.MATHEMATICAL: "Mathematical Ability",
    SkillType.LOGICAL: "Logical Reasoning",
    SkillType.PROBLEM_SOLVING: "Problem Solving",
}

SPEED_TOO_FAST_TEXT: str = (
    "You answered very quickly. Consider spending more time analyzing each question "
    "to improve accuracy."
)
SPEED_TOO_SLOW_TEXT: str = (
    "You took considerable time per question. Work on improving speed through timed "
    "practice sessions."
)
SPEED_BALANCED_TEXT: str = (
    "Good balance between speed and accuracy! Maintain this pace while practicing."
)
SPEED_INSUFFICIENT_TEXT: str = (
    "Not enough timing data to analyze your pace yet."
)

STUDY_SCHEDULE_TEXT: str = (
    "Study Schedule: 2 hours daily - 1.2 hrs weak areas, 30 mins practice, 30 mins revision"
)

STUDY_MATERIALS: dict[str, list[str]] = {
    "Physics": [
        "NCERT Physics Textbooks (Class 11-12)",
        "HC Verma - Concepts of Physics",
        "Khan Academy Physics Videos",
        "MIT OpenCourseWare - Physics",
        "Practice numerical problems daily",
    ],
    "Mathematics": [
        "RD Sharma Mathematics",
        "NCERT Mathematics (Class 11-12)",
        "Khan Academy Math",
        "Brilliant.org - Problem Solving",
        "Practice 20 problems daily",
    ],
    "Logical Reasoning": [
        "RS Aggarwal - Logical Reasoning",
        "Arun Sharma - Logical Reasoning",
        "Solve puzzles on BrainTeaser apps",
        "Practice pattern recognition daily",
        "Lumosity brain training",
    ],
    "Verbal Ability": [
        "Wren & Martin English Grammar",
        "Word Power Made Easy - Norman Lewis",
        "Read newspapers daily",
        "Vocabulary.com practice",
        "GRE vocabulary lists",
    ],
    "Data Interpretation": [
        "Arun Sharma - Data Interpretation",
        "Practice charts and graphs",
        "Excel data analysis tutorials",
        "Economic Times - Data sections",
        "Kaggle data visualization",
    ],
}

GENERIC_MATERIALS_TEMPLATE: tuple[str, ...] = (
    "Search online tutorials for {category}",
    "YouTube educational channels",
    "Practice previous year questions",
    "Join study groups",
    "Use mobile learning apps",
)
