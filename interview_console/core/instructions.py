"""
Pre-interview instruction carousel.

Shown as a modal after an interview is started and before the interview
page opens. The last step swaps "Next" for "Acknowledge & Start".
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class InstructionPoint:
    text: str
    sub_points: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class InstructionStep:
    title: str
    points: tuple[InstructionPoint, ...]
    bulleted: bool = True


INSTRUCTION_STEPS: tuple[InstructionStep, ...] = (
    InstructionStep(
        title="Interview Format",
        points=(
            InstructionPoint("The AI interviewer will ask you one question at a time, similar to how a human interviewer would."),
            InstructionPoint("Speak your answer out loud, and you'll see the live transcript as you talk."),
            InstructionPoint("After answering, you'll have the option to re-record or edit your response if you feel it wasn't up to the mark."),
            InstructionPoint("Once you're satisfied and submit your response, you'll be redirected to the next question automatically."),
            InstructionPoint("You only have three attempts for each response, so use them wisely."),
        ),
    ),
    InstructionStep(
        title="What to Expect",
        bulleted=False,
        points=(
            InstructionPoint(
                "The questions are customized to your selected company, job role, and industry (not mandatory). "
                "You will be assessed across four main areas:",
                sub_points=(
                    "Question wise analysis: scores each answer with strengths, gaps, and improvement guidance along with suggested answers.",
                    "Video-based analysis: insights on confidence, clarity, expressions, and any signs of nervousness for every answer you give.",
                    "Overall interview feedback: detailed feedback aligned with the interview type highlighting what you did well and what to work on.",
                    "Skill-wise scoring: personalized scores for each skill required for the specific role you're preparing for.",
                ),
            ),
        ),
    ),
    InstructionStep(
        title="How to Respond Effectively",
        points=(
            InstructionPoint("Think out loud - explain your reasoning steps, not just the final answer."),
            InstructionPoint("Use examples or experiences wherever possible (projects, internships, or coursework)."),
            InstructionPoint("If you're unsure about an answer, say how you'd approach finding a solution - that still earns credit."),
            InstructionPoint("Keep responses concise but complete (2-3 minutes per question is ideal)."),
            InstructionPoint('Avoid one-word or generic answers like "Yes," "No," or "I don\'t know."'),
        ),
    ),
    InstructionStep(
        title="After the Interview",
        points=(
            InstructionPoint(
                "Once the interview is complete, you'll receive personalized feedback based on:",
                sub_points=(
                    "Each question and your corresponding response alongside the AI suggested answers.",
                    "Core competency breakdown based on predefined rubrics tailored to the interview type.",
                    "Personalized scoring for each relevant skill.",
                ),
            ),
            InstructionPoint("The feedback will be structured and actionable, so you can focus on specific areas of improvement."),
        ),
    ),
    InstructionStep(
        title="Important Guidelines",
        points=(
            InstructionPoint("Be honest and authentic - don't copy responses from the internet."),
            InstructionPoint("The AI records your answers to analyze and generate feedback; no personal data is shared externally."),
            InstructionPoint("Ensure a quiet environment and a stable internet connection for best results."),
        ),
    ),
    InstructionStep(
        title="When You're Ready",
        points=(
            InstructionPoint('Click "Acknowledge & Start" when you\'re prepared to begin.'),
            InstructionPoint("Take a deep breath - this is a safe, learning-focused space."),
            InstructionPoint("Good luck! You've got this."),
        ),
    ),
)


class InstructionCarousel:
    """Step-by-step walk through INSTRUCTION_STEPS."""

    def __init__(self, steps: tuple[InstructionStep, ...] = INSTRUCTION_STEPS):
        self.steps = steps
        self.current = 0
        self.is_starting = False

    @property
    def step(self) -> InstructionStep:
        return self.steps[self.current]

    @property
    def is_last(self) -> bool:
        return self.current == len(self.steps) - 1

    def next(self) -> None:
        self.current = min(self.current + 1, len(self.steps) - 1)

    def previous(self) -> None:
        self.current = max(self.current - 1, 0)

    def go_to(self, index: int) -> None:
        self.current = min(max(index, 0), len(self.steps) - 1)

    @property
    def primary_action(self) -> str:
        if not self.is_last:
            return "Next"
        return "Starting..." if self.is_starting else "Acknowledge & Start"

    def as_dict(self) -> dict:
        step = self.step
        return {
            "index": self.current,
            "total": len(self.steps),
            "title": step.title,
            "bulleted": step.bulleted,
            "points": [
                {"text": point.text, "sub_points": list(point.sub_points)}
                for point in step.points
            ],
            "previous_disabled": self.current == 0,
            "primary_action": self.primary_action,
        }
