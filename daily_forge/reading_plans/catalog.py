"""
Built-in reading plans. Each day of a plan maps to one passage reference in
API.Bible notation; the verse text itself is fetched from the scripture
provider when a devotion is requested.
"""

from dataclasses import dataclass
from datetime import date
from typing import Dict, List, Optional, Tuple

from daily_forge.core.config import DEFAULT_BIBLE_ID
from daily_forge.core.errors import UnknownReadingPlanError
from daily_forge.reading_plans.schemas import Devotion, ReadingPlanSummary
from daily_forge.reading_plans.scripture import ScriptureProvider


@dataclass(frozen=True)
class ReadingPlanDefinition:
    id: str
    name: str
    description: str
    passages: Tuple[str, ...]
    titles: Tuple[str, ...] = ()

    @property
    def duration(self) -> int:
        return len(self.passages)

    def day_index(self, day: int) -> int:
        """0-based index for a 1-based day, clamped to the available passages."""
        return min(max(day, 1), self.duration) - 1

    def title_for(self, day: int) -> str:
        index = self.day_index(day)
        if index < len(self.titles):
            return self.titles[index]
        return f"{self.name}: Day {index + 1}"

    def summary(self) -> ReadingPlanSummary:
        return ReadingPlanSummary(
            id=self.id, name=self.name, description=self.description, duration=self.duration
        )


READING_PLANS: Dict[str, ReadingPlanDefinition] = {
    plan.id: plan
    for plan in (
        ReadingPlanDefinition(
            id="warrior-psalms",
            name="Warrior Psalms",
            description="30 days of Psalms focused on strength, courage, and leadership",
            passages=(
                "PSA.18.1-PSA.18.3", "PSA.27.1-PSA.27.3", "PSA.31.24", "PSA.46.1-PSA.46.3", "PSA.91.1-PSA.91.4",
                "PSA.20.7", "PSA.18.2", "PSA.23.4", "PSA.16.8", "PSA.144.1",
                "PSA.73.26", "PSA.37.5", "PSA.3.3", "PSA.18.39", "PSA.68.17",
                "PSA.47.1", "PSA.98.1", "PSA.7.11", "PSA.18.32", "PSA.89.19",
                "PSA.30.1", "PSA.62.11", "PSA.63.8", "PSA.21.1", "PSA.29.11",
                "PSA.144.1", "PSA.29.4", "PSA.18.37", "PSA.68.35", "PSA.21.13",
            ),
            titles=(
                "The Warrior's Strength", "Courage in Battle", "Stand Strong", "God Our Fortress", "Divine Protection",
                "Victory Through Faith", "The Lord is My Rock", "Fearless in Battle", "God's Right Hand", "Mighty Warrior",
                "Strength in Weakness", "Unshakeable Faith", "Divine Shield", "Conquering Spirit", "God's Army",
                "Battle Cry", "Victory Song", "Divine Justice", "Unstoppable Force", "God's Champion",
                "Rising Above", "Divine Power", "Unbreakable Bond", "God's Victory", "Eternal Strength",
                "Spiritual Warfare", "Divine Authority", "Unconquerable Spirit", "God's Might", "Final Victory",
            ),
        ),
        ReadingPlanDefinition(
            id="leadership-proverbs",
            name="Leadership Proverbs",
            description="Daily wisdom from Proverbs for godly leadership",
            passages=(
                "PRO.16.9", "PRO.27.17", "PRO.29.18", "PRO.31.8-PRO.31.9", "PRO.14.23",
                "PRO.11.14", "PRO.15.18", "PRO.21.3", "PRO.27.18", "PRO.10.9",
                "PRO.25.28", "PRO.11.25", "PRO.15.1", "PRO.12.22", "PRO.27.23",
                "PRO.22.6", "PRO.28.1", "PRO.27.2", "PRO.13.11", "PRO.15.1",
                "PRO.15.22", "PRO.16.7", "PRO.19.21", "PRO.22.1", "PRO.9.10",
                "PRO.20.7", "PRO.3.5", "PRO.17.17", "PRO.2.6", "PRO.16.3", "PRO.13.22",
            ),
            titles=(
                "Divine Planning", "Iron Sharpens Iron", "Vision & Leadership", "Speak Up for Justice", "Diligent Work",
                "Wise Counsel", "Patient Leadership", "Righteous Judgment", "Humble Service", "Integrity First",
                "Disciplined Life", "Generous Heart", "Peaceful Resolution", "Honest Communication", "Faithful Stewardship",
                "Mentoring Others", "Courageous Decisions", "Servant Leadership", "Wise Investments", "Righteous Anger",
                "Team Building", "Conflict Resolution", "Long-term Thinking", "Character Development", "Spiritual Growth",
                "Leading by Example", "Building Trust", "Making Sacrifices", "Seeking Wisdom", "Finishing Strong",
                "Legacy Building",
            ),
        ),
        ReadingPlanDefinition(
            id="courage-joshua",
            name="Courage & Conquest",
            description="Study Joshua for lessons in courage and faith",
            passages=(
                "JOS.1.9", "JOS.3.15-JOS.3.17", "JOS.6.20", "JOS.24.15", "JOS.21.45",
                "JOS.2.1", "JOS.2.11", "JOS.4.7", "JOS.5.9", "JOS.5.14",
                "JOS.7.11", "JOS.7.5", "JOS.8.1", "JOS.8.30", "JOS.8.34",
                "JOS.9.14", "JOS.10.13", "JOS.10.40", "JOS.11.23", "JOS.14.2",
                "JOS.20.2", "JOS.21.2", "JOS.22.4", "JOS.24.15",
            ),
        ),
        ReadingPlanDefinition(
            id="strength-isaiah",
            name="Strength in Isaiah",
            description="Isaiah's messages of strength and hope",
            passages=(
                "ISA.40.31", "ISA.12.2", "ISA.41.10", "ISA.40.29", "ISA.26.4",
                "ISA.1.4", "ISA.9.6", "ISA.9.6", "ISA.9.6", "ISA.9.6",
                "ISA.9.2", "ISA.25.4", "ISA.61.1", "ISA.40.1", "ISA.51.12",
                "ISA.33.22", "ISA.6.5", "ISA.6.3", "ISA.44.6", "ISA.48.12",
                "ISA.40.11", "ISA.55.1", "ISA.55.1", "ISA.35.8", "ISA.26.19",
                "ISA.55.7", "ISA.54.8", "ISA.54.10", "ISA.25.8",
            ),
        ),
    )
}


def list_plans() -> List[ReadingPlanSummary]:
    return [plan.summary() for plan in READING_PLANS.values()]


def get_plan(plan_id: str) -> ReadingPlanDefinition:
    plan = READING_PLANS.get(plan_id)
    if plan is None:
        raise UnknownReadingPlanError(plan_id)
    return plan


def get_devotion(
    provider: ScriptureProvider,
    plan_id: str,
    day: int,
    today: date,
    version: Optional[str] = None,
) -> Devotion:
    """
    Builds the devotion for one day of a plan.

    Args:
        provider (ScriptureProvider): Source of the verse text.
        plan_id (str): Catalog plan id.
        day (int): 1-based plan day; clamped to the plan's last passage.
        today (date): Calendar date stamped on the devotion.
        version (Optional[str]): Bible version id. Defaults to DEFAULT_BIBLE_ID.

    Returns:
        Devotion: Title, passage reference and fetched verses.

    Raises:
        UnknownReadingPlanError: If the plan is not in the catalog.
        ScriptureProviderError: If the verse text cannot be fetched.
    """
    plan = get_plan(plan_id)
    index = plan.day_index(day)
    reference = plan.passages[index]
    verse = provider.get_passage(version or DEFAULT_BIBLE_ID, reference)

    return Devotion(
        date=today,
        plan_id=plan.id,
        day=index + 1,
        title=plan.title_for(day),
        reference=reference,
        verses=[verse] if verse is not None else [],
    )
